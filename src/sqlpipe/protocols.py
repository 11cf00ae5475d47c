"""
Canonical protocol definitions for sqlpipe.

Protocols define contracts without inheritance: the execution primitives
and the transaction pipeline depend on shape, never on a concrete
connection or transaction class.  A plain database handle and an open
transaction both satisfy :class:`Handle`, so the same step function works
inside or outside a pipeline.

Architecture:
    ::

        protocols.py
        ├── Execer       : execute(sql, args) → ExecResult
        ├── Queryer      : query(sql, args) → RowSet, query_one(sql, args) → Row
        ├── Handle       : Execer + Queryer (alias: DB)
        ├── Transaction  : Handle + commit() + rollback()
        ├── Database     : Handle + begin() → Transaction
        └── Sqlizer      : to_sql() → (text, args)

    Implementations:
        DBAPIHandle / DBAPITransaction   (sqlpipe.adapters.dbapi)
        SQLiteAdapter                    (sqlpipe.adapters.sqlite)
        EngineAdapter / EngineTransaction (sqlpipe.adapters.engine)

Tags:
    protocol, connection, transaction, database, sqlpipe, contracts
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqlpipe.results import ExecResult, Row, RowSet


@runtime_checkable
class Execer(Protocol):
    """Runs statements that do not return rows (INSERT/UPDATE/DELETE)."""

    def execute(self, sql: str, args: Sequence[Any] = ()) -> ExecResult:
        ...


@runtime_checkable
class Queryer(Protocol):
    """Runs statements that return rows."""

    def query(self, sql: str, args: Sequence[Any] = ()) -> RowSet:
        ...

    def query_one(self, sql: str, args: Sequence[Any] = ()) -> Row:
        """Errors (including "no rows") surface when the row is scanned."""
        ...


@runtime_checkable
class Handle(Execer, Queryer, Protocol):
    """
    Anything that can execute and query SQL.

    Satisfied by both a plain database handle and an open transaction.
    """


DB = Handle


@runtime_checkable
class Transaction(Handle, Protocol):
    """A handle bound to one open transaction."""

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


@runtime_checkable
class Database(Handle, Protocol):
    """A database that can open transactions."""

    def begin(self) -> Transaction:
        ...


@runtime_checkable
class Sqlizer(Protocol):
    """A statement that renders itself into positional SQL."""

    def to_sql(self) -> tuple[str, Sequence[Any]]:
        ...


__all__ = [
    "Execer",
    "Queryer",
    "Handle",
    "DB",
    "Transaction",
    "Database",
    "Sqlizer",
]
