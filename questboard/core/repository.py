"""
FILE: questboard/core/repository.py
PURPOSE: Durable key/value persistence backed by SQLite
EXPORTS:
  - KeyValueStore (class)
    - load(key, default) -> Any
    - save(key, value) -> bool
    - save_many(values) -> bool
    - request_durability() -> bool
  - DEFAULT_DB_NAME
DEPENDENCIES:
  - sqlite3 (stdlib)
  - json (stdlib)
  - pathlib (stdlib)
  - logging (stdlib)
NOTES:
  - One row per logical key, value stored as JSON text
  - Best-effort: load() and save() never raise; failures are logged and
    the in-memory state stays authoritative
  - Corrupt JSON is treated the same as a missing key
  - Each call opens its own connection (short-lived, single user)
"""

import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any, Mapping

from .exceptions import StorageError

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "questboard.db"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at INTEGER NOT NULL
);
"""

UPSERT_SQL = """
INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
"""


class KeyValueStore:
    """Named JSON slices in a single SQLite file."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._durable = False

    # ---- low-level helpers ----

    def _get_connection(self) -> sqlite3.Connection:
        """
        Open a connection, creating the directory and schema on first use.

        Raises:
            StorageError: If the directory or database can't be opened
        """
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path), timeout=5.0)
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Cannot open {self.db_path}: {e}") from e
        try:
            conn.row_factory = sqlite3.Row
            self._init_database(conn)
            if self._durable:
                conn.execute("PRAGMA synchronous=FULL")
        except sqlite3.Error as e:
            conn.close()
            raise StorageError(f"Cannot open {self.db_path}: {e}") from e
        return conn

    @staticmethod
    def _init_database(conn: sqlite3.Connection) -> None:
        # Safe to call repeatedly (CREATE TABLE IF NOT EXISTS)
        cursor = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='kv'"
        )
        if cursor.fetchone() is None:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    @staticmethod
    def _encode(value: Any) -> str:
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value is not JSON-serializable: {e}") from e

    def _write(self, items: Mapping[str, Any]) -> None:
        now = int(time.time() * 1000)
        rows = [(key, self._encode(value), now) for key, value in items.items()]
        conn = self._get_connection()
        try:
            with conn:
                conn.executemany(UPSERT_SQL, rows)
        except sqlite3.Error as e:
            raise StorageError(f"Write failed: {e}") from e
        finally:
            conn.close()

    # ---- public API ----

    def load(self, key: str, default: Any = None) -> Any:
        """
        Return the saved value for `key`, or `default`.

        Missing rows, unreadable databases and corrupt JSON all come back as
        `default`; nothing is raised.
        """
        try:
            conn = self._get_connection()
        except StorageError as e:
            logger.warning("Load of %r failed, using default: %s", key, e)
            return default

        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            logger.warning("Load of %r failed, using default: %s", key, e)
            return default
        finally:
            conn.close()

        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except (TypeError, ValueError):
            logger.warning("Stored value for %r is corrupt, using default", key)
            return default

    def save(self, key: str, value: Any) -> bool:
        """Best-effort write of one key. Returns False (and logs) on failure."""
        return self.save_many({key: value})

    def save_many(self, values: Mapping[str, Any]) -> bool:
        """Write several keys in one transaction. Returns False (and logs) on failure."""
        try:
            self._write(values)
        except StorageError as e:
            logger.warning("Save of %s failed: %s", ", ".join(values), e)
            return False
        return True

    def request_durability(self) -> bool:
        """
        Ask SQLite for crash-safe writes (WAL journal + full sync).

        Returns:
            True if both settings took effect; informational only
        """
        try:
            conn = self._get_connection()
        except StorageError as e:
            logger.warning("Durability request failed: %s", e)
            return False
        try:
            mode = conn.execute("PRAGMA journal_mode=WAL").fetchone()[0]
            conn.execute("PRAGMA synchronous=FULL")
            sync = conn.execute("PRAGMA synchronous").fetchone()[0]
        except sqlite3.Error as e:
            logger.warning("Durability request failed: %s", e)
            return False
        finally:
            conn.close()
        # synchronous is per-connection, later connections re-apply it
        granted = str(mode).lower() == "wal" and sync == 2
        self._durable = granted
        logger.debug("Durability request: journal_mode=%s synchronous=%s", mode, sync)
        return granted
