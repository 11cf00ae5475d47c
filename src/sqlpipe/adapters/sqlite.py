"""SQLite database adapter."""

from __future__ import annotations

import sqlite3

from sqlpipe.errors import DatabaseConnectionError

from .base import DatabaseAdapter
from .dbapi import DBAPIHandle, DBAPITransaction


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter.

    Uses the built-in sqlite3 module in autocommit mode: statements run
    outside a transaction commit immediately, and :meth:`begin` issues an
    explicit ``BEGIN``.  Suitable for:
    - Development and testing
    - Single-process applications

    One adapter owns one connection, so at most one transaction can be
    open on it at a time; a second :meth:`begin` while one is open raises
    ``sqlite3.OperationalError``.
    """

    backend = "sqlite"

    def __init__(
        self,
        path: str = ":memory:",
        *,
        readonly: bool = False,
        timeout: float = 5.0,
    ):
        super().__init__()
        self.path = path
        self.readonly = readonly
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        """Connect to SQLite database."""
        uri = self.path.startswith("file:") or "?" in self.path

        try:
            self._conn = sqlite3.connect(
                self.path,
                timeout=self._timeout,
                check_same_thread=False,
                isolation_level=None,
                uri=uri,
            )
            self._conn.execute("PRAGMA foreign_keys = ON")
            if self.readonly:
                self._conn.execute("PRAGMA query_only = ON")
            self._connected = True

        except sqlite3.Error as e:
            raise DatabaseConnectionError(
                f"Failed to connect to SQLite: {e}",
                cause=e,
            ) from e

    def disconnect(self) -> None:
        """Close SQLite connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
            self._connected = False

    def get_connection(self) -> sqlite3.Connection:
        """Get the SQLite connection, connecting on first use."""
        if not self._conn:
            self.connect()
        if self._conn is None:
            raise DatabaseConnectionError("SQLite connection is not open")
        return self._conn

    def handle(self) -> DBAPIHandle:
        return DBAPIHandle(self.get_connection())

    def begin(self) -> DBAPITransaction:
        conn = self.get_connection()
        conn.execute("BEGIN")
        return DBAPITransaction(conn)


__all__ = [
    "SQLiteAdapter",
]
