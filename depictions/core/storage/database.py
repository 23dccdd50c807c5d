"""Database helper that owns the connection and hands out store handles."""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path

from depictions.core.storage.handle import StoreHandle
from depictions.core.storage.table import CREATE_TABLE_STATEMENT

MEMORY = ":memory:"


class DatabaseHelper:
    """Opens the SQLite database lazily and creates the schema on first use."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create a database connection."""
        with self._lock:
            if self._conn is None:
                if self._db_path != MEMORY:
                    Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
                # Autocommit; transactions are opened explicitly by handles.
                self._conn = sqlite3.connect(
                    self._db_path, isolation_level=None, check_same_thread=False
                )
                self._conn.row_factory = sqlite3.Row
                self._conn.executescript(CREATE_TABLE_STATEMENT)
            return self._conn

    def get_readable(self) -> StoreHandle:
        """Handle for queries only."""
        return StoreHandle(self._get_connection(), self._lock, writable=False)

    def get_writable(self) -> StoreHandle:
        """Handle for queries and mutations."""
        return StoreHandle(self._get_connection(), self._lock, writable=True)

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> DatabaseHelper:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()


def get_default_db_path(project_root: Path) -> Path:
    """Get the default database path for a project."""
    return project_root / ".depictions" / "depictions.db"
