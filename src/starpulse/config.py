"""Configuration loading and API key lookup for StarPulse."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import keyring


SERVICE_NAME = "starpulse-gemini"
KEY_NAME = "api_key"

DEFAULT_CONFIG_PATH = Path("config/starpulse.json")


def get_api_key() -> str:
    """Get Gemini API key: system keyring first, then GEMINI_API_KEY env var fallback.

    Returns:
        API key string.

    Raises:
        RuntimeError: If no key found anywhere, with actionable instructions.
    """
    api_key = keyring.get_password(SERVICE_NAME, KEY_NAME)
    if api_key:
        return api_key

    api_key = os.environ.get("GEMINI_API_KEY")
    if api_key:
        return api_key

    raise RuntimeError(
        "Gemini API key not found.\n"
        "Set it with: starpulse config set-api-key YOUR_KEY\n"
        "Or: export GEMINI_API_KEY=your-key"
    )


def set_api_key(api_key: str) -> None:
    """Store the Gemini API key in the system keyring."""
    keyring.set_password(SERVICE_NAME, KEY_NAME, api_key)


@dataclass
class Settings:
    """Runtime settings with defaults matching the shipped UI timings."""

    db_path: Path = field(default_factory=lambda: Path("data/starpulse.db"))
    history_key: str = "starpulse_history"
    history_limit: int = 10
    suggestion_min_length: int = 2
    debounce_seconds: float = 0.5
    progress_tick_seconds: float = 0.1
    progress_increment: float = 0.166
    progress_ceiling: float = 99.5
    settle_seconds: float = 0.6
    profile_model: str = "gemini-3-pro-preview"
    suggest_model: str = "gemini-3-flash-preview"
    max_suggestions: int = 5

    def __post_init__(self) -> None:
        """Ensure paths are Path objects and limits are sane."""
        if isinstance(self.db_path, str):
            self.db_path = Path(self.db_path)
        if self.history_limit < 1:
            raise ValueError(f"history_limit must be >= 1, got {self.history_limit}")
        if self.suggestion_min_length < 1:
            raise ValueError(
                f"suggestion_min_length must be >= 1, got {self.suggestion_min_length}"
            )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from JSON, merging with defaults.

    Reads ``config/starpulse.json`` when *config_path* is ``None``. If the
    file does not exist, returns a ``Settings`` with defaults. Unknown keys
    are ignored.

    Args:
        config_path: Optional path to a JSON settings file.

    Returns:
        Settings with values from file merged over defaults.
    """
    path = config_path if config_path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        return Settings()

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    known = {f.name for f in fields(Settings)}
    kwargs = {key: value for key, value in data.items() if key in known}
    return Settings(**kwargs)
