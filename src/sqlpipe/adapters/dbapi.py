"""Handles over a DB-API 2.0 connection (sqlite3, psycopg2, pymysql, ...)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlpipe.errors import DatabaseError
from sqlpipe.results import ExecResult, Row, RowSet


class DBAPIHandle:
    """Runs positional SQL on a DB-API connection, one cursor per call."""

    def __init__(self, connection: Any) -> None:
        self._connection = connection

    @property
    def connection(self) -> Any:
        return self._connection

    def execute(self, sql: str, args: Sequence[Any] = ()) -> ExecResult:
        cursor = self._connection.cursor()
        try:
            cursor.execute(sql, tuple(args))
            return ExecResult(
                rowcount=cursor.rowcount,
                lastrowid=getattr(cursor, "lastrowid", None),
            )
        finally:
            cursor.close()

    def query(self, sql: str, args: Sequence[Any] = ()) -> RowSet:
        cursor = self._connection.cursor()
        try:
            cursor.execute(sql, tuple(args))
        except Exception:
            cursor.close()
            raise
        columns = [desc[0] for desc in cursor.description or ()]
        return RowSet(columns, iter(cursor.fetchone, None), cursor.close)

    def query_one(self, sql: str, args: Sequence[Any] = ()) -> Row:
        try:
            rows = self.query(sql, args)
        except Exception as exc:
            return Row.failed(exc)
        return Row(rows)


class DBAPITransaction(DBAPIHandle):
    """A DB-API connection inside a transaction the caller already began.

    Once committed or rolled back the handle refuses further work.  A commit
    that fails leaves the transaction open, so it can still be rolled back.
    """

    def __init__(self, connection: Any) -> None:
        super().__init__(connection)
        self._finished: str | None = None

    @property
    def finished(self) -> bool:
        return self._finished is not None

    def _check_open(self) -> None:
        if self._finished is not None:
            raise DatabaseError(f"transaction already {self._finished}")

    def execute(self, sql: str, args: Sequence[Any] = ()) -> ExecResult:
        self._check_open()
        return super().execute(sql, args)

    def query(self, sql: str, args: Sequence[Any] = ()) -> RowSet:
        self._check_open()
        return super().query(sql, args)

    def commit(self) -> None:
        self._check_open()
        self._connection.commit()
        self._finished = "committed"

    def rollback(self) -> None:
        self._check_open()
        self._connection.rollback()
        self._finished = "rolled back"


__all__ = [
    "DBAPIHandle",
    "DBAPITransaction",
]
