"""Shared pytest fixtures for StarPulse tests.

Provides a profile record factory, a controllable fake profile service,
a temporary blob store and fast controller settings.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from starpulse.config import Settings
from starpulse.models import ProfileRecord
from starpulse.services import HistoryStore, SqliteBlobStore


def build_record(name: str, rating: float = 7.5, **overrides) -> ProfileRecord:
    """Build a fully populated ProfileRecord for *name*."""
    data = {
        "name": name,
        "original_name": name,
        "stage_name": name,
        "popularity_rating": rating,
        "rating_justification": f"{name} has a measurable global footprint.",
        "total_stats": {"views": "1.2B avg", "sales": "50M", "followers": "300M", "awards": "12 Grammy"},
        "basic_info": {
            "age": "34",
            "nationality": "USA",
            "gender": "Female",
            "spouse": "None",
            "birth_date": "1989-12-13",
            "awards": ["Grammy Album of the Year", "MTV VMA"],
        },
        "social_links": {"instagram": "https://instagram.com/example"},
        "growth_background": "Grew up on a farm and started writing songs at twelve.",
        "career_story": "Moved to Nashville, signed at sixteen, crossed over to pop.",
        "works": [{"title": "Debut", "year": "2006", "role": "Lead", "stats": "7x Platinum"}],
        "famous_works": [{"title": "Hit Single", "youtube_url": "https://youtube.com/watch?v=x"}],
        "featured_media": {
            "title": "Big Album",
            "type": "album",
            "description": "Defining record of the era.",
            "release_date": "2014-10-27",
            "related_people": ["Producer One"],
        },
        "related_celebrities": [
            {"name": "Ed Sheeran", "relationship": "Collaborator"},
            {"name": "Selena Gomez", "relationship": "Friend"},
        ],
        "others": "Known for surprise releases.",
        "tags": ["pop", "country"],
    }
    data.update(overrides)
    return ProfileRecord.model_validate(data)


class FakeProfileService:
    """Profile service double with per-name latency and failures.

    ``delays`` maps a name to seconds before fetch_profile resolves;
    ``failures`` maps a name to the exception it raises.
    """

    def __init__(self) -> None:
        self.delays: dict[str, float] = {}
        self.failures: dict[str, Exception] = {}
        self.suggestions: dict[str, list[str]] = {}
        self.suggest_delay: float = 0.0
        self.suggest_error: Exception | None = None
        self.fetch_calls: list[str] = []
        self.suggest_calls: list[str] = []
        self.suggest_cancelled: list[str] = []

    async def fetch_profile(self, name: str) -> ProfileRecord:
        self.fetch_calls.append(name)
        await asyncio.sleep(self.delays.get(name, 0.0))
        if name in self.failures:
            raise self.failures[name]
        return build_record(name)

    async def suggest(self, partial: str) -> list[str]:
        self.suggest_calls.append(partial)
        try:
            await asyncio.sleep(self.suggest_delay)
        except asyncio.CancelledError:
            self.suggest_cancelled.append(partial)
            raise
        if self.suggest_error is not None:
            raise self.suggest_error
        return self.suggestions.get(partial, [f"{partial} One", f"{partial} Two"])


@pytest.fixture
def record_factory():
    """The build_record factory, as a fixture."""
    return build_record


@pytest.fixture
def fake_service() -> FakeProfileService:
    return FakeProfileService()


@pytest.fixture
def blob_store(tmp_path: Path) -> SqliteBlobStore:
    """Temporary SQLite blob store (file-based for WAL support)."""
    store = SqliteBlobStore(tmp_path / "starpulse.db")
    yield store
    store.close()


@pytest.fixture
def history_store(blob_store: SqliteBlobStore) -> HistoryStore:
    return HistoryStore(blob_store)


@pytest.fixture
def fast_settings(tmp_path: Path) -> Settings:
    """Settings with timings shrunk so lifecycle tests run in milliseconds."""
    return Settings(
        db_path=tmp_path / "starpulse.db",
        debounce_seconds=0.05,
        progress_tick_seconds=0.01,
        settle_seconds=0.1,
    )
