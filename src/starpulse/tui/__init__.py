"""StarPulse interactive TUI.

Textual interface for looking up a performer's global fame index, with
debounced name suggestions, a cancellable profile lookup and a persisted
list of recent results.
"""

from __future__ import annotations

from pathlib import Path


def run_tui(config_path: Path | None = None, db_path: Path | None = None) -> None:
    """Build services from settings and launch the TUI application.

    All imports are deferred for fast module loading.

    Args:
        config_path: Optional JSON settings file.
        db_path: Overrides the configured history database path.
    """
    from starpulse.config import get_api_key, load_settings
    from starpulse.services import HistoryStore, ProfileService, SqliteBlobStore
    from starpulse.tui.app import StarPulseApp
    from starpulse.tui.telemetry import configure_file_logging

    settings = load_settings(config_path)
    if db_path is not None:
        settings.db_path = db_path

    try:
        api_key = get_api_key()
    except RuntimeError as exc:
        print(f"Error: {exc}")
        raise SystemExit(1)

    configure_file_logging()

    service = ProfileService(
        api_key=api_key,
        profile_model=settings.profile_model,
        suggest_model=settings.suggest_model,
        max_suggestions=settings.max_suggestions,
    )
    with SqliteBlobStore(settings.db_path) as store:
        history_store = HistoryStore(
            store, key=settings.history_key, limit=settings.history_limit
        )
        app = StarPulseApp(
            profile_service=service,
            history_store=history_store,
            settings=settings,
        )
        app.run()
