"""Connection factory: create a database adapter from a URL string.

Supported URL schemes
---------------------
==================  ==========================================  ============
Scheme              Example                                     Backend
==================  ==========================================  ============
``memory``          ``memory`` or ``:memory:`` or ``None``       SQLite RAM
``sqlite``          ``sqlite:///path/to/file.db``                SQLite file
``(file path)``     ``./data/my.db`` or ``/tmp/app.db``          SQLite file
(anything else)     ``postgresql://user:pw@host:port/db``        SQLAlchemy
==================  ==========================================  ============

Usage
-----
::

    from sqlpipe.connection import connect

    db = connect()                                  # in-memory SQLite
    db = connect("sqlite:///runs.db")               # file SQLite
    db = connect("postgresql://app:pw@localhost/app", pool_size=10)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqlpipe.adapters import DatabaseAdapter, EngineAdapter, SQLiteAdapter
from sqlpipe.logging import get_logger
from sqlpipe.settings import SqlpipeSettings

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConnectionInfo:
    """Metadata about a database connection."""

    backend: str
    """Backend identifier: ``"sqlite"``, ``"postgresql"``, etc."""

    persistent: bool
    """Whether data survives process exit."""

    url: str
    """The URL or path used to create the connection."""

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"


def _parse_url(db: str | None) -> tuple[str, str]:
    """Parse a database URL into (scheme, target).

    scheme is one of ``"memory"``, ``"sqlite"``, ``"engine"``.
    """
    if db is None or db in ("", "memory", ":memory:"):
        return "memory", ":memory:"

    for prefix in ("sqlite:///", "sqlite://"):
        if db.startswith(prefix):
            path = db[len(prefix):]
            if not path or path == ":memory:":
                return "memory", ":memory:"
            return "sqlite", path

    if "://" in db:
        return "engine", db

    # Bare file path
    return "sqlite", db


def connect(db: str | None = None, **engine_kwargs: Any) -> DatabaseAdapter:
    """Create a database adapter from a URL, path, or keyword.

    ``engine_kwargs`` are forwarded to
    :func:`~sqlpipe.adapters.engine.create_engine` for non-SQLite URLs.
    """
    return connect_with_info(db, **engine_kwargs)[0]


def connect_with_info(db: str | None = None, **engine_kwargs: Any) -> tuple[DatabaseAdapter, ConnectionInfo]:
    """Like :func:`connect`, also returning what backend was chosen."""
    scheme, target = _parse_url(db)

    if scheme == "memory":
        adapter: DatabaseAdapter = SQLiteAdapter(":memory:")
        info = ConnectionInfo(backend="sqlite", persistent=False, url=":memory:")
    elif scheme == "sqlite":
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        adapter = SQLiteAdapter(target)
        info = ConnectionInfo(backend="sqlite", persistent=True, url=target)
    else:
        adapter = EngineAdapter.from_url(target, **engine_kwargs)
        info = ConnectionInfo(backend=adapter.backend, persistent=True, url=target)

    logger.debug("connection.created", backend=info.backend, persistent=info.persistent)
    return adapter, info


def connect_from_settings(settings: SqlpipeSettings) -> DatabaseAdapter:
    """Create an adapter from :class:`SqlpipeSettings` database fields."""
    return connect(
        settings.database_url,
        echo=settings.database_echo,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_timeout=settings.database_pool_timeout,
    )


__all__ = [
    "ConnectionInfo",
    "connect",
    "connect_with_info",
    "connect_from_settings",
]
