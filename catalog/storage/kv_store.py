# catalog/storage/kv_store.py

"""SQLite-backed key-value store used as the cache's persistence layer."""

import logging
import sqlite3
from pathlib import Path
from typing import Protocol

from catalog.config.settings import Settings
from catalog.models.exceptions import CacheError

logger = logging.getLogger("catalog.kv_store")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS kv (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL
);
"""


class KeyValueStore(Protocol):
    """Minimal get/put store the local cache is written against."""

    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str) -> bool: ...

    def delete(self, key: str) -> bool: ...


class SQLiteKeyValueStore:
    """Single-table SQLite store; every ``put`` commits on its own.

    Raises ``CacheError`` from the constructor when the database file
    cannot be opened or is not a SQLite database.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        path = db_path or Settings.CACHE_DB_PATH
        self._path = path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(path))
        except (OSError, sqlite3.Error) as exc:
            logger.error(
                "Cannot open cache database %s: %s", path, exc, exc_info=True
            )
            raise CacheError(f"cache database unavailable: {exc}") from exc
        try:
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            self._conn.close()
            logger.error(
                "Cache database %s unusable: %s", path, exc, exc_info=True
            )
            raise CacheError(f"cache database unavailable: {exc}") from exc
        logger.debug("SQLiteKeyValueStore opened at %s", path)

    @property
    def path(self) -> Path:
        return self._path

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def get(self, key: str) -> str | None:
        """Return the stored value, or ``None`` when absent or unreadable."""
        try:
            row = self._conn.execute(
                "SELECT value FROM kv WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            logger.error(
                "Read of key '%s' failed: %s", key, exc, exc_info=True
            )
            return None
        return None if row is None else str(row[0])

    def put(self, key: str, value: str) -> bool:
        """Upsert ``key``.  Returns False if the write did not commit."""
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO kv (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                    (key, value),
                )
        except sqlite3.Error as exc:
            logger.error(
                "Write of key '%s' failed: %s", key, exc, exc_info=True
            )
            return False
        return True

    def delete(self, key: str) -> bool:
        """Remove ``key``.  Returns True if a row was deleted."""
        try:
            with self._conn:
                cur = self._conn.execute(
                    "DELETE FROM kv WHERE key = ?", (key,)
                )
        except sqlite3.Error as exc:
            logger.error(
                "Delete of key '%s' failed: %s", key, exc, exc_info=True
            )
            return False
        return cur.rowcount > 0
