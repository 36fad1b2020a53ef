"""SQLite key-value blob store backing the persisted search history.

Each key maps to one opaque text blob. Values survive restarts; callers
own the encoding of what they put in.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS blobs (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);
"""


class SqliteBlobStore:
    """Durable key-value blob storage in a single SQLite file.

    Usage:
        with SqliteBlobStore("data/starpulse.db") as store:
            store.set("starpulse_history", "[]")
            blob = store.get("starpulse_history")
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(self.db_path)
        self._setup_pragmas()
        self.conn.executescript(SCHEMA_SQL)

    def _setup_pragmas(self) -> None:
        """Configure SQLite pragmas for durability without blocking readers."""
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA synchronous=NORMAL")

        result = self.conn.execute("PRAGMA journal_mode").fetchone()[0]
        if result != "wal":
            logger.debug("WAL mode not enabled, got: %s", result)

    def get(self, key: str) -> str | None:
        """Return the blob stored under *key*, or None if absent."""
        row = self.conn.execute(
            "SELECT value FROM blobs WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def set(self, key: str, blob: str) -> None:
        """Insert or replace the blob stored under *key*."""
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO blobs(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = strftime('%Y-%m-%dT%H:%M:%f', 'now')
                """,
                (key, blob),
            )

    def delete(self, key: str) -> None:
        """Remove *key* if present."""
        with self.conn:
            self.conn.execute("DELETE FROM blobs WHERE key = ?", (key,))

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()

    def __enter__(self) -> SqliteBlobStore:
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object) -> None:
        self.close()
