"""Statement builder adapter: statement objects → ``(sql, args)``.

A statement is either a SQLAlchemy Core construct (``select()``,
``insert()``, ``update()``, ``delete()``, DDL, ``text()``) or any object
satisfying :class:`~sqlpipe.protocols.Sqlizer`.  The builder renders it
for one positional-paramstyle dialect so the text can be handed straight
to a DB-API cursor together with a flat argument list.

A statement that cannot be rendered raises :class:`StatementBuildError`;
the builder never hands back empty SQL.

Diagnostics are opt-in per builder: ``StatementBuilder(debug=True)`` logs
a ``statement.built`` record with the text and arguments through the
logger it was constructed with.

Usage::

    builder = StatementBuilder.for_dialect("postgresql", debug=True)
    sql, args = builder.build(select(users).where(users.c.id == 5))
    # ("SELECT ... WHERE users.id = %s", [5])
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import exc as sa_exc
from sqlalchemy.dialects import mysql, sqlite
from sqlalchemy.dialects.postgresql import psycopg2 as pg_psycopg2
from sqlalchemy.engine.interfaces import Dialect
from sqlalchemy.sql.elements import ClauseElement

from sqlpipe.errors import ConfigError, StatementBuildError
from sqlpipe.logging import get_logger
from sqlpipe.protocols import Sqlizer
from sqlpipe.settings import SqlpipeSettings, get_settings

Statement = ClauseElement | Sqlizer

_DIALECTS: dict[str, Callable[[], Dialect]] = {
    "sqlite": sqlite.dialect,
    "postgresql": lambda: pg_psycopg2.dialect(paramstyle="format"),
    "postgres": lambda: pg_psycopg2.dialect(paramstyle="format"),
    "mysql": mysql.dialect,
}


@dataclass(frozen=True)
class RawStatement:
    """Literal SQL with positional arguments."""

    sql: str
    args: Sequence[Any] = field(default_factory=tuple)

    def to_sql(self) -> tuple[str, Sequence[Any]]:
        return self.sql, tuple(self.args)


class StatementBuilder:
    """Renders statements into positional SQL for a single dialect.

    Parameters:
        dialect: SQLAlchemy dialect with a positional paramstyle.
                 Defaults to SQLite (``?`` placeholders).
        debug: Log every built statement with its arguments.
        logger: structlog-style logger receiving the diagnostics.
    """

    def __init__(
        self,
        dialect: Dialect | None = None,
        *,
        debug: bool = False,
        logger: Any = None,
    ) -> None:
        self.dialect = dialect if dialect is not None else sqlite.dialect()
        if not self.dialect.positional:
            raise ConfigError(
                f"dialect {self.dialect.name!r} uses non-positional paramstyle "
                f"{self.dialect.paramstyle!r}"
            )
        self.debug = debug
        self.logger = logger if logger is not None else get_logger(__name__)

    @classmethod
    def for_dialect(cls, name: str, **kwargs: Any) -> StatementBuilder:
        """Create a builder for a dialect by name (sqlite, postgresql, mysql)."""
        try:
            factory = _DIALECTS[name.lower()]
        except KeyError:
            raise ConfigError(
                f"unsupported dialect {name!r}; expected one of {sorted(_DIALECTS)}"
            ) from None
        return cls(factory(), **kwargs)

    @classmethod
    def from_settings(cls, settings: SqlpipeSettings | None = None, **kwargs: Any) -> StatementBuilder:
        settings = settings or get_settings()
        kwargs.setdefault("debug", settings.debug)
        return cls.for_dialect(settings.dialect, **kwargs)

    def build(self, statement: Statement) -> tuple[str, list[Any]]:
        """Render *statement* into ``(sql, args)``.

        Raises:
            StatementBuildError: the statement could not be rendered, or
                rendered to empty text.
        """
        if isinstance(statement, ClauseElement):
            sql, args = self._compile(statement)
        elif isinstance(statement, Sqlizer):
            try:
                sql, raw_args = statement.to_sql()
            except StatementBuildError:
                raise
            except Exception as exc:
                raise StatementBuildError(f"could not build statement: {exc}", cause=exc) from exc
            args = list(raw_args)
        else:
            raise StatementBuildError(f"not a buildable statement: {type(statement).__name__}")

        if not sql or not sql.strip():
            raise StatementBuildError("statement rendered empty SQL")

        if self.debug:
            self.logger.debug("statement.built", sql=sql, args=args)
        return sql, args

    def _compile(self, statement: ClauseElement) -> tuple[str, list[Any]]:
        try:
            compiled = statement.compile(
                dialect=self.dialect,
                compile_kwargs={"render_postcompile": True},
            )
            params = compiled.construct_params() or {}
        except (sa_exc.SQLAlchemyError, TypeError, ValueError) as exc:
            raise StatementBuildError(f"could not compile statement: {exc}", cause=exc) from exc

        positions = getattr(compiled, "positiontup", None) or []
        return compiled.string, [params[name] for name in positions]


_default_builder: dict[str, tuple[SqlpipeSettings, StatementBuilder]] = {}


def default_builder() -> StatementBuilder:
    """Builder configured from :func:`~sqlpipe.settings.get_settings`.

    Rebuilt whenever the settings are reloaded.
    """
    settings = get_settings()
    cached = _default_builder.get("default")
    if cached is None or cached[0] is not settings:
        cached = (settings, StatementBuilder.from_settings(settings))
        _default_builder["default"] = cached
    return cached[1]


def reset_default_builder() -> None:
    """Forget the cached default builder."""
    _default_builder.clear()


def sqlize(statement: Statement, builder: StatementBuilder | None = None) -> tuple[str, list[Any]]:
    """Build *statement* with *builder* (or the default builder)."""
    return (builder or default_builder()).build(statement)


__all__ = [
    "Statement",
    "RawStatement",
    "StatementBuilder",
    "default_builder",
    "reset_default_builder",
    "sqlize",
]
