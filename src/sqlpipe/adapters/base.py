"""Database adapter base class.

All adapters share a connect/disconnect lifecycle, hand out plain
handles and transactions, and delegate ``execute``/``query``/``query_one``
to a plain handle, so an adapter is itself a valid
:class:`~sqlpipe.protocols.Database`.

Tags:
    sqlpipe, database, abstract-base, adapter-pattern
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from sqlpipe.protocols import Handle, Transaction
from sqlpipe.results import ExecResult, Row, RowSet


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    Subclasses implement the lifecycle plus :meth:`handle` and
    :meth:`begin`; everything else is shared.
    """

    backend: str = "unknown"

    def __init__(self) -> None:
        self._connected = False

    @property
    def is_connected(self) -> bool:
        """Whether adapter is connected."""
        return self._connected

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to database."""
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Close connection to database."""
        ...

    @abstractmethod
    def handle(self) -> Handle:
        """A non-transactional handle; each statement commits on its own."""
        ...

    @abstractmethod
    def begin(self) -> Transaction:
        """Open a transaction and return its handle."""
        ...

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Commit when the block exits normally, roll back when it raises."""
        tx = self.begin()
        try:
            yield tx
        except BaseException:
            tx.rollback()
            raise
        tx.commit()

    def execute(self, sql: str, args: Sequence[Any] = ()) -> ExecResult:
        return self.handle().execute(sql, args)

    def query(self, sql: str, args: Sequence[Any] = ()) -> RowSet:
        return self.handle().query(sql, args)

    def query_one(self, sql: str, args: Sequence[Any] = ()) -> Row:
        return self.handle().query_one(sql, args)

    def __enter__(self) -> DatabaseAdapter:
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()


__all__ = [
    "DatabaseAdapter",
]
