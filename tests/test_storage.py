"""
Tests for the key-value store backends.
"""

import sqlite3

import pytest

from journal_server.services.storage import InMemoryKeyValueStore, SqliteKeyValueStore, StorageFailure


@pytest.fixture
def sqlite_store(tmp_path):
    return SqliteKeyValueStore(tmp_path / "kv.sqlite3", "summaries")


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return SqliteKeyValueStore(tmp_path / "kv.sqlite3", "summaries")


def test_get_set_delete(store):
    assert store.get("entry:1") is None
    store.set("entry:1", "one")
    assert store.get("entry:1") == "one"
    store.set("entry:1", "uno")
    assert store.get("entry:1") == "uno"
    store.delete("entry:1")
    assert store.get("entry:1") is None
    store.delete("entry:1")


def test_keys_with_prefix_is_literal_and_sorted(store):
    for key in ["entry:2", "entry:1", "entry-meta", "character:ava", "entry%:x"]:
        store.set(key, key)

    assert store.keys_with_prefix("entry:") == ["entry:1", "entry:2"]
    assert store.keys_with_prefix("entry%") == ["entry%:x"]
    assert len(store.keys_with_prefix("")) == 5


def test_apply_sets_and_deletes_together(store):
    store.set("entry:1", "one")
    store.set("entry:2", "two")

    store.apply({"entry-meta": "meta"}, ["entry:1", "entry:2"])

    assert store.keys_with_prefix("") == ["entry-meta"]


def test_apply_set_wins_over_delete_of_same_key(store):
    store.apply({"entry:1": "new"}, ["entry:1"])
    assert store.get("entry:1") == "new"


def test_sqlite_namespaces_are_isolated(tmp_path):
    path = tmp_path / "kv.sqlite3"
    summaries = SqliteKeyValueStore(path, "summaries")
    chronicle = SqliteKeyValueStore(path, "chronicle")

    summaries.set("journal:part:1", "summary cache value")
    chronicle.set("journal:part:1", "part summary")

    assert summaries.get("journal:part:1") == "summary cache value"
    assert chronicle.get("journal:part:1") == "part summary"

    chronicle.clear_all()
    assert chronicle.get("journal:part:1") is None
    assert summaries.get("journal:part:1") == "summary cache value"


def test_sqlite_values_survive_reopen(tmp_path):
    path = tmp_path / "kv.sqlite3"
    SqliteKeyValueStore(path, "summaries").set("entry:1", "one")

    assert SqliteKeyValueStore(path, "summaries").get("entry:1") == "one"


def test_sqlite_rolls_back_failed_apply(sqlite_store, monkeypatch):
    sqlite_store.set("entry:1", "one")
    original_connect = sqlite_store._connect

    class FailingConnection:
        def __init__(self, conn):
            self._conn = conn

        def execute(self, sql, params=()):
            if sql.startswith("INSERT"):
                raise sqlite3.OperationalError("disk I/O error")
            return self._conn.execute(sql, params)

        def close(self):
            self._conn.close()

    monkeypatch.setattr(sqlite_store, "_connect", lambda: FailingConnection(original_connect()))

    with pytest.raises(StorageFailure):
        sqlite_store.apply({"entry-meta": "meta"}, ["entry:1"])

    monkeypatch.setattr(sqlite_store, "_connect", original_connect)
    assert sqlite_store.get("entry:1") == "one"
    assert sqlite_store.get("entry-meta") is None


def test_sqlite_requires_namespace(tmp_path):
    with pytest.raises(ValueError):
        SqliteKeyValueStore(tmp_path / "kv.sqlite3", "")


def test_memory_snapshot_is_a_copy():
    store = InMemoryKeyValueStore({"a": "1"})
    snapshot = store.snapshot()
    snapshot["b"] = "2"
    assert store.get("b") is None
