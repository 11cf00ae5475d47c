"""Qualifiers: composable filters applied to a SELECT statement.

A qualifier is a plain function ``Select -> Select``.  SQLAlchemy's
``Select.where`` is generative, so a qualifier always returns a new
statement and never touches the one it was given.

Conditions from every qualifier are ANDed; a field filtered twice gets two
conditions, never an override.  Within one :func:`by_eq` map conditions
are emitted in lexical field order so the generated SQL is stable.

Usage::

    stmt = qualify(select(users), by_eq({"status": "active"}), by_id(7))
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy import and_, column, literal_column
from sqlalchemy.sql.expression import ColumnElement, Select

Qualifier = Callable[[Select], Select]

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def _column(field: str) -> ColumnElement[Any]:
    # Table-qualified keys ("users.id") are rendered as written.
    if "." in field:
        return literal_column(field)
    return column(field)


def _in_values(value: Any) -> list[Any]:
    if not isinstance(value, (set, frozenset)):
        return list(value)
    try:
        return sorted(value)
    except TypeError:
        return sorted(value, key=repr)


def _condition(field: str, value: Any) -> ColumnElement[bool]:
    col = _column(field)
    if value is None:
        return col.is_(None)
    if isinstance(value, _SEQUENCE_TYPES):
        return col.in_(_in_values(value))
    return col == value


def by_eq(eq: Mapping[str, Any]) -> Qualifier:
    """Filter on equality for every ``field: value`` pair.

    ``None`` becomes ``IS NULL`` and a list/tuple/set becomes ``IN (...)``.
    """
    conditions = [_condition(field, eq[field]) for field in sorted(eq)]

    def qualifier(stmt: Select) -> Select:
        if not conditions:
            return stmt
        return stmt.where(and_(*conditions))

    return qualifier


by_equality = by_eq


def by_id(id: Any) -> Qualifier:
    """Filter on the ``id`` column."""
    return by_eq({"id": id})


def qualify(stmt: Select, *qualifiers: Qualifier) -> Select:
    """Apply *qualifiers* to *stmt* in the order given."""
    for qualifier in qualifiers:
        stmt = qualifier(stmt)
    return stmt


__all__ = [
    "Qualifier",
    "by_eq",
    "by_equality",
    "by_id",
    "qualify",
]
