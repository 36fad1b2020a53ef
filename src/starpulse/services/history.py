"""Recent-results history: ordering rules and persistence.

The history is a most-recent-first list of ProfileRecord, unique by
case-insensitive subject name and capped at a fixed length. It is stored
as one JSON blob in the key-value store.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from starpulse.models import ProfileRecord

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_KEY = "starpulse_history"
DEFAULT_HISTORY_LIMIT = 10

_HISTORY_ADAPTER = TypeAdapter(list[ProfileRecord])


class BlobStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, blob: str) -> None: ...


def upsert_history(
    history: list[ProfileRecord],
    record: ProfileRecord,
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> list[ProfileRecord]:
    """Return a new history with *record* at the front.

    Any existing entry with the same case-insensitive name is dropped and
    the result is truncated to *limit* entries. The input list is not
    modified.
    """
    filtered = [item for item in history if item.identity != record.identity]
    return [record, *filtered][:limit]


class HistoryStore:
    """Loads and saves the history list under a fixed key.

    Usage::

        history_store = HistoryStore(SqliteBlobStore("data/starpulse.db"))
        history = history_store.load()
        history = upsert_history(history, record)
        history_store.save(history)
    """

    def __init__(
        self,
        store: BlobStore,
        key: str = DEFAULT_HISTORY_KEY,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self._store = store
        self._key = key
        self._limit = limit

    @property
    def limit(self) -> int:
        return self._limit

    def load(self) -> list[ProfileRecord]:
        """Read the persisted history.

        A missing blob, unreadable storage, or a blob that fails JSON or
        schema validation all yield an empty list.
        """
        try:
            blob = self._store.get(self._key)
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Failed to read history key=%s: %s", self._key, exc)
            return []
        if not blob:
            return []

        try:
            records = _HISTORY_ADAPTER.validate_json(blob)
        except ValidationError as exc:
            logger.warning(
                "Discarding corrupt history key=%s (%d validation errors)",
                self._key,
                exc.error_count(),
            )
            return []

        # Re-apply the invariants in case the blob was written by hand.
        return _dedupe(records, self._limit)

    def save(self, history: list[ProfileRecord]) -> bool:
        """Persist *history*. Storage failures are logged and reported as False."""
        blob = _HISTORY_ADAPTER.dump_json(history[: self._limit]).decode("utf-8")
        try:
            self._store.set(self._key, blob)
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Failed to persist history key=%s: %s", self._key, exc)
            return False
        logger.debug("Persisted history key=%s entries=%d", self._key, len(history))
        return True

    def clear(self) -> bool:
        """Persist an empty history."""
        return self.save([])


def _dedupe(records: list[ProfileRecord], limit: int) -> list[ProfileRecord]:
    """Keep the first occurrence of each name, preserving order, up to *limit*."""
    seen: set[str] = set()
    result: list[ProfileRecord] = []
    for record in records:
        if record.identity in seen:
            continue
        seen.add(record.identity)
        result.append(record)
        if len(result) == limit:
            break
    return result
