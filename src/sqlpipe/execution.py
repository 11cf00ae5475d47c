"""Execution primitives: build a statement, then delegate to a handle.

Each primitive builds first; a statement that fails to build raises
:class:`~sqlpipe.errors.StatementBuildError` before the handle is touched.
Driver errors from :func:`execute` and :func:`query` propagate verbatim;
:func:`query_one` defers them to :meth:`Row.scan <sqlpipe.results.Row.scan>`.
"""

from __future__ import annotations

from sqlpipe.protocols import Execer, Queryer
from sqlpipe.results import ExecResult, Row, RowSet
from sqlpipe.statement import Statement, StatementBuilder, sqlize


def execute(statement: Statement, handle: Execer, *, builder: StatementBuilder | None = None) -> ExecResult:
    """Run an INSERT/UPDATE/DELETE-class statement."""
    sql, args = sqlize(statement, builder)
    return handle.execute(sql, args)


def query(statement: Statement, handle: Queryer, *, builder: StatementBuilder | None = None) -> RowSet:
    """Run a statement returning zero or more rows.

    The caller owns the returned RowSet and must close it (or exhaust it).
    """
    sql, args = sqlize(statement, builder)
    return handle.query(sql, args)


def query_one(statement: Statement, handle: Queryer, *, builder: StatementBuilder | None = None) -> Row:
    """Run a statement returning at most one row."""
    sql, args = sqlize(statement, builder)
    return handle.query_one(sql, args)


__all__ = [
    "execute",
    "query",
    "query_one",
]
