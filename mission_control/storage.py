"""
Durable key/value storage backend (SQLite).

One database file is one logical store. Values are opaque strings; the
caller owns serialization.
"""
import sqlite3
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_DB = Path.home() / ".local" / "share" / "mission-control" / "board.db"


class StorageUnavailable(Exception):
    """Raised when the underlying store cannot be read or written."""
    pass


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection with WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


class KeyValueStorage:
    """SQLite-backed string → string store."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize storage and create the table if needed."""
        if db_path is None:
            db_path = str(DEFAULT_DB)
        self.db_path = str(db_path)
        self._initialized = False

    def _init_schema(self, conn: sqlite3.Connection) -> None:
        if self._initialized:
            return
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        self._initialized = True

    def _open(self) -> sqlite3.Connection:
        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = _connect(self.db_path)
            self._init_schema(conn)
            return conn
        except (OSError, sqlite3.Error) as e:
            raise StorageUnavailable(f"Cannot open {self.db_path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        """Return the stored value for `key`, or None if absent."""
        conn = self._open()
        try:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ? LIMIT 1", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Read of {key!r} failed: {e}") from e
        finally:
            conn.close()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        """Overwrite `key` with `value` in a single transaction."""
        now = datetime.now(timezone.utc).isoformat()
        conn = self._open()
        try:
            with conn:
                conn.execute("""
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
                """, (key, value, now))
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Write of {key!r} failed: {e}") from e
        finally:
            conn.close()
        logger.debug(f"Stored {len(value)} chars under {key!r}")

