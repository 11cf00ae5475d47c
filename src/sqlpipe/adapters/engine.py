"""SQLAlchemy engine adapter.

Runs positional SQL through ``Connection.exec_driver_sql`` on a pooled
SQLAlchemy ``Engine``.  Every :meth:`EngineAdapter.begin` checks out its
own connection, so independent pipelines running concurrently never share
a transaction.

Tags:
    sqlpipe, sqlalchemy, engine, pool, transaction
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy import event
from sqlalchemy import exc as sa_exc
from sqlalchemy.engine import Connection, CursorResult, Engine

from sqlpipe.errors import DatabaseConnectionError, DatabaseError
from sqlpipe.results import ExecResult, Row, RowSet

from .base import DatabaseAdapter


def create_engine(
    url: str = "sqlite://",
    *,
    echo: bool = False,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    pool_timeout: int | None = None,
    **kwargs: Any,
) -> Engine:
    """Create a SQLAlchemy engine with sane defaults.

    Pool parameters are ignored for SQLite.  SQLite engines get foreign
    keys switched on for every new connection.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = _sa_create_engine(url, echo=echo, **kwargs)

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection: Any, _rec: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    pool_kwargs: dict[str, Any] = {}
    if pool_size is not None:
        pool_kwargs["pool_size"] = pool_size
    if max_overflow is not None:
        pool_kwargs["max_overflow"] = max_overflow
    if pool_timeout is not None:
        pool_kwargs["pool_timeout"] = pool_timeout

    return _sa_create_engine(url, echo=echo, **pool_kwargs, **kwargs)


def _run(conn: Connection, sql: str, args: Sequence[Any]) -> CursorResult[Any]:
    return conn.exec_driver_sql(sql, tuple(args) if args else None)


def _rowset(result: CursorResult[Any], *closers: Any) -> RowSet:
    def close() -> None:
        result.close()
        for closer in closers:
            closer()

    return RowSet(list(result.keys()), result, close)


class EngineHandle:
    """Non-transactional handle: each call checks out a pooled connection."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def execute(self, sql: str, args: Sequence[Any] = ()) -> ExecResult:
        with self._engine.begin() as conn:
            result = _run(conn, sql, args)
            return ExecResult(rowcount=result.rowcount, lastrowid=result.lastrowid)

    def query(self, sql: str, args: Sequence[Any] = ()) -> RowSet:
        conn = self._engine.connect()
        try:
            result = _run(conn, sql, args)
        except Exception:
            conn.close()
            raise
        return _rowset(result, conn.close)

    def query_one(self, sql: str, args: Sequence[Any] = ()) -> Row:
        try:
            rows = self.query(sql, args)
        except Exception as exc:
            return Row.failed(exc)
        return Row(rows)


class EngineTransaction:
    """One pooled connection holding one open transaction."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn
        self._trans = conn.begin()

    @property
    def connection(self) -> Connection:
        return self._conn

    def _check_open(self) -> None:
        if not self._trans.is_active:
            raise DatabaseError("transaction is no longer active")

    def execute(self, sql: str, args: Sequence[Any] = ()) -> ExecResult:
        self._check_open()
        result = _run(self._conn, sql, args)
        return ExecResult(rowcount=result.rowcount, lastrowid=result.lastrowid)

    def query(self, sql: str, args: Sequence[Any] = ()) -> RowSet:
        self._check_open()
        return _rowset(_run(self._conn, sql, args))

    def query_one(self, sql: str, args: Sequence[Any] = ()) -> Row:
        try:
            rows = self.query(sql, args)
        except Exception as exc:
            return Row.failed(exc)
        return Row(rows)

    def commit(self) -> None:
        try:
            self._trans.commit()
        finally:
            self._conn.close()

    def rollback(self) -> None:
        try:
            self._trans.rollback()
        finally:
            self._conn.close()


class EngineAdapter(DatabaseAdapter):
    """Adapter over a SQLAlchemy ``Engine`` (any backend SQLAlchemy supports)."""

    def __init__(self, engine: Engine) -> None:
        super().__init__()
        self._engine = engine
        self.backend = engine.dialect.name

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> EngineAdapter:
        """Build the engine with :func:`create_engine` and wrap it."""
        return cls(create_engine(url, **kwargs))

    @property
    def engine(self) -> Engine:
        return self._engine

    def connect(self) -> None:
        """Check that the database is reachable."""
        try:
            with self._engine.connect():
                pass
        except sa_exc.SQLAlchemyError as e:
            raise DatabaseConnectionError(
                f"Failed to connect to {self.backend}: {e}",
                cause=e,
            ) from e
        self._connected = True

    def disconnect(self) -> None:
        """Dispose of the connection pool."""
        self._engine.dispose()
        self._connected = False

    def handle(self) -> EngineHandle:
        return EngineHandle(self._engine)

    def begin(self) -> EngineTransaction:
        conn = self._engine.connect()
        try:
            return EngineTransaction(conn)
        except Exception:
            conn.close()
            raise


__all__ = [
    "create_engine",
    "EngineHandle",
    "EngineTransaction",
    "EngineAdapter",
]
