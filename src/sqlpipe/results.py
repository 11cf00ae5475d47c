"""Driver-neutral result objects returned by database handles.

``ExecResult`` carries the metadata of a write, ``RowSet`` is a single-pass
cursor over rows, and ``Row`` is a deferred single-row result whose errors
surface only when it is scanned.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, cast

from sqlpipe.errors import NoRowsError


@dataclass(frozen=True)
class ExecResult:
    """Outcome of an INSERT/UPDATE/DELETE as reported by the driver."""

    rowcount: int = -1
    lastrowid: Any = None


class RowSet:
    """
    Lazily iterated rows of a query, yielded as ``dict`` keyed by column.

    A RowSet is single-pass: once a row has been consumed it is gone, and
    iterating an exhausted RowSet yields nothing.  Close it (or use it as a
    context manager) to release the underlying cursor.
    """

    def __init__(
        self,
        columns: Sequence[str],
        rows: Iterable[Sequence[Any]],
        close: Callable[[], None] | None = None,
    ) -> None:
        self.columns = list(columns)
        self._rows = iter(rows)
        self._close = close
        self._closed = False

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return self

    def __next__(self) -> dict[str, Any]:
        if self._closed:
            raise StopIteration
        raw = next(self._rows, None)
        if raw is None:
            self.close()
            raise StopIteration
        return dict(zip(self.columns, tuple(raw), strict=False))

    def fetchone(self) -> dict[str, Any] | None:
        return next(self, None)

    def fetchall(self) -> list[dict[str, Any]]:
        return list(self)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._close is not None:
            self._close()

    def __enter__(self) -> RowSet:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class Row:
    """
    Deferred result of a single-row query.

    Neither a driver error nor an empty result is reported when the query
    is issued; both surface from :meth:`scan` / :meth:`scalar`.
    """

    def __init__(self, rows: RowSet | None = None, error: BaseException | None = None) -> None:
        if rows is None and error is None:
            raise ValueError("Row needs either rows or an error")
        self._rows = rows
        self._error = error
        self._value: dict[str, Any] | None = None

    @classmethod
    def failed(cls, error: BaseException) -> Row:
        return cls(error=error)

    def scan(self) -> dict[str, Any]:
        """Return the row as a dict.

        Raises:
            NoRowsError: the query matched nothing.
            Exception: whatever the driver raised while querying.
        """
        if self._error is not None:
            raise self._error
        if self._value is None:
            with cast(RowSet, self._rows) as rows:
                value = rows.fetchone()
            if value is None:
                self._error = NoRowsError()
                raise self._error
            self._value = value
        return self._value

    def scalar(self) -> Any:
        """Return the first column of the row."""
        return next(iter(self.scan().values()))


__all__ = [
    "ExecResult",
    "RowSet",
    "Row",
]
