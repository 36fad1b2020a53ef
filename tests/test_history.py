"""Tests for history ordering rules and HistoryStore persistence."""

from __future__ import annotations

import json
import sqlite3
from unittest.mock import MagicMock

from starpulse.services import HistoryStore, upsert_history


class TestUpsertHistory:
    def test_prepends_new_record(self, record_factory):
        history = [record_factory("Drake")]
        result = upsert_history(history, record_factory("Adele"))
        assert [r.name for r in result] == ["Adele", "Drake"]

    def test_does_not_mutate_input(self, record_factory):
        history = [record_factory("Drake")]
        upsert_history(history, record_factory("Adele"))
        assert [r.name for r in history] == ["Drake"]

    def test_replaces_same_name_case_insensitively(self, record_factory):
        history = [record_factory("Adele", rating=5.0), record_factory("Drake")]
        fresh = record_factory("ADELE", rating=8.0)

        result = upsert_history(history, fresh)

        assert len(result) == 2
        assert result[0] is fresh
        assert result[1].name == "Drake"

    def test_moves_existing_entry_to_front(self, record_factory):
        history = [record_factory(n) for n in ("A1", "B2", "C3")]
        result = upsert_history(history, record_factory("c3"))
        assert [r.name for r in result] == ["c3", "A1", "B2"]

    def test_truncates_to_limit(self, record_factory):
        history = [record_factory(f"P{i}") for i in range(10)]
        result = upsert_history(history, record_factory("New"), limit=10)
        assert len(result) == 10
        assert result[0].name == "New"
        assert result[-1].name == "P8"


class TestHistoryStore:
    def test_missing_blob_loads_empty(self, history_store):
        assert history_store.load() == []

    def test_save_then_load_preserves_order(self, history_store, record_factory):
        records = [record_factory("Adele"), record_factory("Drake")]
        assert history_store.save(records) is True
        loaded = history_store.load()
        assert loaded == records

    def test_invalid_json_loads_empty(self, blob_store):
        blob_store.set("starpulse_history", "[{broken")
        assert HistoryStore(blob_store).load() == []

    def test_schema_mismatch_loads_empty(self, blob_store):
        blob_store.set("starpulse_history", json.dumps([{"name": "Adele"}]))
        assert HistoryStore(blob_store).load() == []

    def test_non_list_blob_loads_empty(self, blob_store):
        blob_store.set("starpulse_history", json.dumps({"name": "Adele"}))
        assert HistoryStore(blob_store).load() == []

    def test_load_enforces_uniqueness_and_limit(self, blob_store, record_factory):
        records = [record_factory("Adele"), record_factory("adele")]
        records += [record_factory(f"P{i}") for i in range(12)]
        blob = "[" + ",".join(r.model_dump_json() for r in records) + "]"
        blob_store.set("starpulse_history", blob)

        loaded = HistoryStore(blob_store, limit=10).load()

        assert len(loaded) == 10
        assert loaded[0].name == "Adele"
        assert [r.name for r in loaded].count("adele") == 0

    def test_custom_key_is_isolated(self, blob_store, record_factory):
        HistoryStore(blob_store, key="other").save([record_factory("Adele")])
        assert HistoryStore(blob_store).load() == []
        assert len(HistoryStore(blob_store, key="other").load()) == 1

    def test_save_failure_returns_false(self, record_factory):
        store = MagicMock()
        store.set.side_effect = sqlite3.OperationalError("database is locked")
        assert HistoryStore(store).save([record_factory("Adele")]) is False

    def test_read_failure_loads_empty(self):
        store = MagicMock()
        store.get.side_effect = sqlite3.DatabaseError("file is not a database")
        assert HistoryStore(store).load() == []

    def test_clear_persists_empty_list(self, history_store, record_factory):
        history_store.save([record_factory("Adele")])
        assert history_store.clear() is True
        assert history_store.load() == []
