"""Tests for the SQLite key/value store."""

import logging
import sqlite3

import pytest

from questboard.core.repository import KeyValueStore


def test_missing_key_returns_default(kv_store):
    assert kv_store.load("points", 0) == 0
    assert kv_store.load("tasks") is None


def test_save_and_load(kv_store):
    assert kv_store.save("points", 140) is True
    assert kv_store.save_many({"upgrades": {"confetti": True}, "videoUrl": "ünïcode"}) is True

    assert kv_store.load("points", 0) == 140
    assert kv_store.load("upgrades", {}) == {"confetti": True}
    assert kv_store.load("videoUrl", "") == "ünïcode"

    # Upsert
    kv_store.save("points", 10)
    assert kv_store.load("points", 0) == 10
    print("✓ Values round-trip as JSON")


def test_corrupt_value_falls_back(kv_store, caplog):
    kv_store.save("tasks", [])
    conn = sqlite3.connect(str(kv_store.db_path))
    with conn:
        conn.execute("UPDATE kv SET value = ? WHERE key = ?", ("{not json", "tasks"))
    conn.close()

    with caplog.at_level(logging.WARNING):
        assert kv_store.load("tasks", []) == []
    assert "corrupt" in caplog.text


def test_unserializable_value_is_not_saved(kv_store):
    assert kv_store.save("points", object()) is False
    assert kv_store.load("points", 0) == 0


def test_unopenable_path_does_not_raise(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    store = KeyValueStore(blocker / "nested" / "board.db")

    assert store.load("points", 7) == 7
    assert store.save("points", 1) is False
    assert store.request_durability() is False


def test_request_durability(kv_store):
    assert kv_store.request_durability() is True
    conn = sqlite3.connect(str(kv_store.db_path))
    mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
    conn.close()
    assert mode == "wal"
    # Writes still work on durable connections
    assert kv_store.save("points", 5) is True
    assert kv_store.load("points") == 5


def test_creates_parent_directory(tmp_path):
    store = KeyValueStore(tmp_path / "a" / "b" / "board.db")
    assert store.save("points", 1) is True
    assert store.db_path.exists()


def test_failed_schema_setup_closes_connection(tmp_path, monkeypatch):
    """A connection whose schema setup fails is closed, and load falls back."""
    opened = []
    real_connect = sqlite3.connect

    def recording_connect(*args, **kwargs):
        conn = real_connect(*args, **kwargs)
        opened.append(conn)
        return conn

    class BrokenSchemaStore(KeyValueStore):
        @staticmethod
        def _init_database(conn):
            raise sqlite3.OperationalError("schema setup failed")

    monkeypatch.setattr(sqlite3, "connect", recording_connect)
    store = BrokenSchemaStore(tmp_path / "board.db")

    assert store.load("points", 3) == 3
    assert store.save("points", 1) is False
    assert len(opened) == 2
    for conn in opened:
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")
