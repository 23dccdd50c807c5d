"""Store handles: readable or writable sessions on a SQLite connection."""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from depictions.core.exceptions import StoreError

logger = logging.getLogger(__name__)


class StoreHandle:
    """A session on the store.

    Readable handles only run queries. Writable handles also insert, update and
    run transactions. Every call holds the shared lock; an open transaction keeps
    holding it until ``end_transaction`` so no other thread can interleave work.
    """

    def __init__(self, conn: sqlite3.Connection, lock: threading.RLock, writable: bool) -> None:
        self._conn = conn
        self._lock = lock
        self._writable = writable
        self._in_transaction = False
        self._successful = False

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    def query(
        self,
        table: str,
        columns: Sequence[str] | None,
        selection: str | None = None,
        args: Sequence[Any] | None = None,
        group_by: str | None = None,
        having: str | None = None,
        order_by: str | None = None,
    ) -> list[sqlite3.Row]:
        """Run a SELECT against ``table``. ``None`` columns selects every column."""
        sql = f"SELECT {', '.join(columns) if columns else '*'} FROM {table}"
        if selection:
            sql += f" WHERE {selection}"
        if group_by:
            sql += f" GROUP BY {group_by}"
        if having:
            sql += f" HAVING {having}"
        if order_by:
            sql += f" ORDER BY {order_by}"
        with self._lock:
            try:
                return self._conn.execute(sql, tuple(args or ())).fetchall()
            except (sqlite3.Error, OverflowError) as e:
                raise StoreError(f"Query on {table} failed: {e}") from e

    def insert(self, table: str, values: Mapping[str, Any]) -> int:
        """Insert one row and return its rowid."""
        self._require_writable("insert")
        columns = list(values)
        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
        with self._lock:
            try:
                cursor = self._conn.execute(sql, tuple(values[c] for c in columns))
            except (sqlite3.Error, OverflowError) as e:
                raise StoreError(f"Insert into {table} failed: {e}") from e
        return cursor.lastrowid  # type: ignore[return-value]

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        selection: str | None,
        args: Sequence[Any] | None = None,
    ) -> int:
        """Update matching rows and return how many were changed."""
        self._require_writable("update")
        columns = list(values)
        assignments = ", ".join(f"{c} = ?" for c in columns)
        sql = f"UPDATE {table} SET {assignments}"
        if selection:
            sql += f" WHERE {selection}"
        params = tuple(values[c] for c in columns) + tuple(args or ())
        with self._lock:
            try:
                cursor = self._conn.execute(sql, params)
            except (sqlite3.Error, OverflowError) as e:
                raise StoreError(f"Update of {table} failed: {e}") from e
        return cursor.rowcount

    def begin_transaction(self) -> None:
        """Start a transaction and hold the lock until it ends."""
        self._require_writable("begin a transaction")
        self._lock.acquire()
        if self._in_transaction:
            self._lock.release()
            raise StoreError("A transaction is already open on this handle")
        try:
            self._conn.execute("BEGIN")
        except sqlite3.Error as e:
            self._lock.release()
            raise StoreError(f"Could not begin transaction: {e}") from e
        self._in_transaction = True
        self._successful = False

    def mark_successful(self) -> None:
        """Mark the open transaction to be committed when it ends."""
        if not self._in_transaction:
            raise StoreError("No transaction is open on this handle")
        self._successful = True

    def end_transaction(self) -> None:
        """Commit if marked successful, otherwise roll back. Releases the lock."""
        if not self._in_transaction:
            raise StoreError("No transaction is open on this handle")
        try:
            if self._successful:
                self._conn.execute("COMMIT")
            else:
                logger.debug("Rolling back transaction")
                self._conn.execute("ROLLBACK")
        except sqlite3.Error as e:
            if self._conn.in_transaction:
                try:
                    self._conn.execute("ROLLBACK")
                except sqlite3.Error:
                    logger.exception("Rollback after a failed transaction end also failed")
            raise StoreError(f"Could not end transaction: {e}") from e
        finally:
            self._in_transaction = False
            self._successful = False
            self._lock.release()

    @contextmanager
    def transaction(self) -> Iterator[StoreHandle]:
        """Scoped transaction: commits when the block completes, rolls back otherwise."""
        self.begin_transaction()
        try:
            yield self
            self.mark_successful()
        finally:
            self.end_transaction()

    def _require_writable(self, action: str) -> None:
        if not self._writable:
            raise StoreError(f"Cannot {action} through a read-only handle")
