"""Optimistic-concurrency version tag for records.

``Versionable`` is a passive mixin: it carries an optional integer version
stored in the ``_version`` column and does not enforce anything by itself.
Query code narrows on it with :func:`by_version` and bumps it with
:meth:`Versionable.next_version`.

Usage::

    @dataclass
    class Account(Versionable):
        id: int = 0
        balance: int = 0

    acct = Account(id=1, balance=10, version=3)
    stmt = qualify(select(accounts), by_id(acct.id), by_version(acct))
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

from sqlpipe.qualifier import Qualifier, by_eq

VERSION_COLUMN = "_version"


@dataclass(kw_only=True)
class Versionable:
    """Mixin adding an optional ``version`` (absent means unconstrained)."""

    version: int | None = field(
        default=None,
        metadata={"column": VERSION_COLUMN, "serialize": False},
    )

    @property
    def is_versioned(self) -> bool:
        return self.version is not None

    def next_version(self) -> int:
        """Version to write on the next update (absent counts as 0)."""
        return (self.version or 0) + 1

    def to_dict(self) -> dict[str, Any]:
        """Serializable fields, without the version tag."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.metadata.get("serialize", True)
        }


def make_versionable(n: int) -> Versionable:
    """A tag present with version *n*."""
    return Versionable(version=n)


def by_version(record: Versionable) -> Qualifier:
    """Narrow on the record's version when it has one; no-op otherwise."""
    if record.version is None:
        return by_eq({})
    return by_eq({VERSION_COLUMN: record.version})


__all__ = [
    "VERSION_COLUMN",
    "Versionable",
    "make_versionable",
    "by_version",
]
