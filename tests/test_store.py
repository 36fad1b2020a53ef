"""Tests for the SQLite key-value blob store."""

from __future__ import annotations

from pathlib import Path

from starpulse.services import SqliteBlobStore


def test_get_missing_key_returns_none(blob_store):
    assert blob_store.get("absent") is None


def test_set_then_get(blob_store):
    blob_store.set("k", "value")
    assert blob_store.get("k") == "value"


def test_set_overwrites(blob_store):
    blob_store.set("k", "one")
    blob_store.set("k", "two")
    assert blob_store.get("k") == "two"
    count = blob_store.conn.execute("SELECT COUNT(*) FROM blobs").fetchone()[0]
    assert count == 1


def test_delete(blob_store):
    blob_store.set("k", "value")
    blob_store.delete("k")
    assert blob_store.get("k") is None


def test_values_survive_reopen(tmp_path: Path):
    db_path = tmp_path / "nested" / "store.db"
    with SqliteBlobStore(db_path) as store:
        store.set("starpulse_history", "[]")

    with SqliteBlobStore(db_path) as store:
        assert store.get("starpulse_history") == "[]"


def test_creates_parent_directory(tmp_path: Path):
    db_path = tmp_path / "a" / "b" / "store.db"
    with SqliteBlobStore(db_path):
        pass
    assert db_path.exists()
