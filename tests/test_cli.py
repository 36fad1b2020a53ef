"""Tests for the typer CLI commands.

Uses typer's CliRunner; the profile service and API key lookup are patched
so no keyring or network access happens.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from starpulse.cli import app
from starpulse.services import HistoryStore, ProfileDeclinedError, SqliteBlobStore
from starpulse.services.profile import DECLINED_MESSAGE

runner = CliRunner()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "cli.db"


def stored_names(db_path: Path) -> list[str]:
    with SqliteBlobStore(db_path) as store:
        return [r.name for r in HistoryStore(store).load()]


def patched_service(fetch: AsyncMock):
    service = MagicMock()
    service.fetch_profile = fetch
    return patch("starpulse.services.ProfileService", return_value=service)


class TestSearchCommand:
    def test_prints_profile_and_saves_history(self, db_path, record_factory):
        fetch = AsyncMock(return_value=record_factory("Adele", rating=8.2))
        with patch("starpulse.cli.get_api_key", return_value="k"), patched_service(fetch):
            result = runner.invoke(app, ["search", "Adele", "--db", str(db_path)])

        assert result.exit_code == 0, result.output
        assert "Adele" in result.output
        assert "8.2" in result.output
        assert "Top-Tier Star" in result.output
        fetch.assert_awaited_once_with("Adele")
        assert stored_names(db_path) == ["Adele"]

    def test_no_save_leaves_history_empty(self, db_path, record_factory):
        fetch = AsyncMock(return_value=record_factory("Adele"))
        with patch("starpulse.cli.get_api_key", return_value="k"), patched_service(fetch):
            result = runner.invoke(
                app, ["search", "Adele", "--db", str(db_path), "--no-save"]
            )

        assert result.exit_code == 0, result.output
        assert stored_names(db_path) == []

    def test_failure_exits_nonzero(self, db_path):
        fetch = AsyncMock(side_effect=ProfileDeclinedError(DECLINED_MESSAGE))
        with patch("starpulse.cli.get_api_key", return_value="k"), patched_service(fetch):
            result = runner.invoke(app, ["search", "Nobody", "--db", str(db_path)])

        assert result.exit_code == 1
        assert "Search failed" in result.output
        assert stored_names(db_path) == []

    def test_blank_name_rejected(self, db_path):
        result = runner.invoke(app, ["search", "   ", "--db", str(db_path)])
        assert result.exit_code == 1
        assert "blank" in result.output

    def test_missing_api_key(self, db_path):
        with patch("starpulse.cli.get_api_key", side_effect=RuntimeError("no key")):
            result = runner.invoke(app, ["search", "Adele", "--db", str(db_path)])
        assert result.exit_code == 1
        assert "no key" in result.output


class TestHistoryCommands:
    def test_list_empty(self, db_path):
        result = runner.invoke(app, ["history", "list", "--db", str(db_path)])
        assert result.exit_code == 0
        assert "No searches yet" in result.output

    def test_list_shows_entries(self, db_path, record_factory):
        with SqliteBlobStore(db_path) as store:
            HistoryStore(store).save([record_factory("Adele"), record_factory("Drake")])

        result = runner.invoke(app, ["history", "list", "--db", str(db_path)])

        assert result.exit_code == 0
        assert "Adele" in result.output
        assert "Drake" in result.output
        assert result.output.index("Adele") < result.output.index("Drake")

    def test_clear_with_yes(self, db_path, record_factory):
        with SqliteBlobStore(db_path) as store:
            HistoryStore(store).save([record_factory("Adele")])

        result = runner.invoke(app, ["history", "clear", "--db", str(db_path), "--yes"])

        assert result.exit_code == 0
        assert stored_names(db_path) == []

    def test_clear_declined_keeps_history(self, db_path, record_factory):
        with SqliteBlobStore(db_path) as store:
            HistoryStore(store).save([record_factory("Adele")])

        result = runner.invoke(app, ["history", "clear", "--db", str(db_path)], input="n\n")

        assert result.exit_code != 0
        assert stored_names(db_path) == ["Adele"]


class TestConfigCommands:
    def test_set_api_key(self):
        with patch("starpulse.cli.set_api_key") as mock_set:
            result = runner.invoke(app, ["config", "set-api-key", "secret"])
        assert result.exit_code == 0
        mock_set.assert_called_once_with("secret")

    def test_show_reports_missing_key(self, tmp_path):
        with patch("starpulse.cli.get_api_key", side_effect=RuntimeError("missing")):
            result = runner.invoke(
                app, ["config", "show", "--config", str(tmp_path / "none.json")]
            )
        assert result.exit_code == 0
        assert "debounce_seconds" in result.output
        assert "missing" in result.output
