"""SQLite-backed key/value settings store."""

import logging
import sqlite3
import threading
from pathlib import Path

from inventory_sync.exceptions import StorageError

logger = logging.getLogger(__name__)

PIN_HASH_KEY = "pin_hash"
SHOPIFY_TOKEN_KEY = "shopify_token"
SHOPIFY_DOMAIN_KEY = "shopify_domain"

CREATE_SETTINGS_TABLE = """
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
)
"""


class SettingsStore:
    """
    Durable key/value settings in a local SQLite file.

    One store owns one connection for the life of the process: open it with
    connect() at startup and close() at shutdown. Calls are serialised on an
    internal lock so the handle may be shared with worker threads.
    """

    def __init__(self, database_path: str | Path) -> None:
        self._database_path = str(database_path)
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def database_path(self) -> str:
        return self._database_path

    def connect(self) -> None:
        """Open the database and ensure the settings table exists."""
        with self._lock:
            if self._conn is not None:
                return
            conn: sqlite3.Connection | None = None
            try:
                conn = sqlite3.connect(self._database_path, check_same_thread=False)
                with conn:
                    conn.execute(CREATE_SETTINGS_TABLE)
            except sqlite3.Error as e:
                if conn is not None:
                    conn.close()
                raise StorageError(
                    "Failed to initialize settings database",
                    detail=f"{self._database_path}: {e}",
                ) from e
            self._conn = conn
        logger.info("SettingsStore connected: %s", self._database_path)

    def close(self) -> None:
        """Close the connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.info("SettingsStore disconnected")

    def __enter__(self) -> "SettingsStore":
        self.connect()
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError("SettingsStore not connected. Call connect() first.")
        return self._conn

    def get(self, key: str) -> str | None:
        """Return the value stored under key, or None."""
        with self._lock:
            conn = self._require_conn()
            try:
                row = conn.execute(
                    "SELECT value FROM settings WHERE key = ?",
                    (key,),
                ).fetchone()
            except sqlite3.Error as e:
                raise StorageError(f"Failed to retrieve setting: {key}", detail=str(e)) from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        """Insert or replace the value stored under key."""
        with self._lock:
            conn = self._require_conn()
            try:
                with conn:
                    conn.execute(
                        "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
                        (key, value),
                    )
            except sqlite3.Error as e:
                raise StorageError(f"Failed to store setting: {key}", detail=str(e)) from e
        logger.debug("Setting stored: %s", key)

    def delete(self, key: str) -> bool:
        """Remove key. Returns True if a row was deleted."""
        with self._lock:
            conn = self._require_conn()
            try:
                with conn:
                    cursor = conn.execute("DELETE FROM settings WHERE key = ?", (key,))
            except sqlite3.Error as e:
                raise StorageError(f"Failed to delete setting: {key}", detail=str(e)) from e
        return cursor.rowcount == 1

    def keys(self) -> list[str]:
        """List stored keys in sorted order."""
        with self._lock:
            conn = self._require_conn()
            try:
                rows = conn.execute("SELECT key FROM settings ORDER BY key").fetchall()
            except sqlite3.Error as e:
                raise StorageError("Failed to list settings", detail=str(e)) from e
        return [r[0] for r in rows]
