"""SQLite-backed key-value store with per-key expiry."""

from __future__ import annotations

from pathlib import Path
import sqlite3
import time
from typing import Callable, Optional

from .config import DEFAULT_CACHE_DB_PATH

Clock = Callable[[], float]

DDL_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS cache_entries (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        expires_at REAL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_cache_entries_expiry ON cache_entries(expires_at)",
)


class KeyValueStore:
    """
    Minimal KV interface over SQLite: ``get``, ``put`` with a TTL, ``delete``.

    Expired entries read as missing and are purged lazily on write.
    """

    def __init__(self, db_path: str | Path | None = None, *, clock: Clock = time.time) -> None:
        self.db_path = Path(db_path) if db_path else DEFAULT_CACHE_DB_PATH
        self.clock = clock
        self._initialized = False

    def _ensure_directory(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> sqlite3.Connection:
        """Return a sqlite3 connection with the schema in place."""
        self._ensure_directory()
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        if not self._initialized:
            with conn:
                for statement in DDL_STATEMENTS:
                    conn.execute(statement)
            self._initialized = True
        return conn

    def get(self, key: str) -> Optional[str]:
        conn = self.connect()
        try:
            row = conn.execute(
                "SELECT value, expires_at FROM cache_entries WHERE key = ?",
                (key,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        expires_at = row["expires_at"]
        if expires_at is not None and expires_at <= self.clock():
            return None
        return row["value"]

    def put(self, key: str, value: str, *, ttl_seconds: Optional[float] = None) -> None:
        now = self.clock()
        expires_at = now + ttl_seconds if ttl_seconds is not None else None
        conn = self.connect()
        try:
            with conn:
                conn.execute(
                    "DELETE FROM cache_entries WHERE expires_at IS NOT NULL AND expires_at <= ?",
                    (now,),
                )
                conn.execute(
                    """
                    INSERT INTO cache_entries (key, value, expires_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        expires_at = excluded.expires_at
                    """,
                    (key, value, expires_at),
                )
        finally:
            conn.close()

    def delete(self, key: str) -> None:
        conn = self.connect()
        try:
            with conn:
                conn.execute("DELETE FROM cache_entries WHERE key = ?", (key,))
        finally:
            conn.close()


__all__ = ["KeyValueStore", "Clock", "DEFAULT_CACHE_DB_PATH"]
