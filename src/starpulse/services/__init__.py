"""Services facade for StarPulse.

Re-exports the history, profile lookup and blob store APIs used by the
TUI and CLI.
"""

from starpulse.services.history import HistoryStore, upsert_history
from starpulse.services.profile import (
    ProfileDeclinedError,
    ProfileError,
    ProfileService,
    ProfileTransportError,
    ProfileValidationError,
)
from starpulse.services.store import SqliteBlobStore

__all__ = [
    "HistoryStore",
    "ProfileDeclinedError",
    "ProfileError",
    "ProfileService",
    "ProfileTransportError",
    "ProfileValidationError",
    "SqliteBlobStore",
    "upsert_history",
]
