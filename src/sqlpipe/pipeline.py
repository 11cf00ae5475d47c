"""Transaction pipeline: ordered steps sharing one transaction.

Manifesto:
    Multi-statement writes (insert a row, stamp its id on the caller's
    object, update a sibling row) must land together or not at all.  A
    pipeline opens one transaction, hands it to each step in order, and
    commits only if every step returned normally.

Lifecycle::

    Idle ──begin()──► Began ──► Running ──all steps ok──► Committed
      │                            │
      └─ begin fails (raised)      └─ step k raises ──► RolledBack
                                      (steps k+1..n never run)

Error reporting:
    - ``begin()`` failure: the driver's exception, unchanged.
    - step failure, clean rollback: the step's exception, unchanged.
    - step failure, rollback also failed: :class:`RollbackError` carrying
      both exceptions.
    - every step ok, commit failed: the transaction is rolled back and
      :class:`CommitError` is raised.

Interrupts (``KeyboardInterrupt``, ``SystemExit``) raised by a step also
roll the transaction back before propagating.

Steps run strictly sequentially on a single transaction handle.  The
handle belongs to the run; steps must not hand it to code that outlives
the call.

Usage::

    def insert_order(tx, order):
        order.id = execute(insert(orders).values(total=order.total), tx).lastrowid

    def stamp_customer(tx, order):
        execute(update(customers).where(...).values(last_order=order.id), tx)

    run_pipeline(db, order, insert_order, stamp_customer)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from sqlpipe.errors import CommitError, RollbackError
from sqlpipe.logging import get_logger
from sqlpipe.protocols import Database, Handle, Transaction

logger = get_logger(__name__)

T = TypeVar("T")

Step = Callable[[Handle, T], Any]


def _step_name(step: Callable[..., Any]) -> str:
    return getattr(step, "__name__", None) or repr(step)


def _discard(tx: Transaction, log: Any) -> None:
    """Roll back after a failed commit; the commit error is what gets reported."""
    try:
        tx.rollback()
    except Exception as rollback_error:
        log.warning("pipeline.discard_failed", error=str(rollback_error))


def run_pipeline(database: Database, target: T, *steps: Step[T], name: str | None = None) -> None:
    """Run *steps* in order inside one transaction opened on *database*.

    Each step is called as ``step(tx, target)``; *target* is the caller's
    object, which steps may read or mutate.  Return values of steps are
    ignored.
    """
    tx = database.begin()
    log = logger.bind(pipeline=name) if name else logger
    log.debug("pipeline.begin", steps=len(steps))

    for index, step in enumerate(steps, start=1):
        try:
            step(tx, target)
        except BaseException as step_error:
            log.warning(
                "pipeline.step_failed",
                step=_step_name(step),
                step_index=index,
                error=str(step_error) or type(step_error).__name__,
            )
            try:
                tx.rollback()
            except Exception as rollback_error:
                log.error("pipeline.rollback_failed", error=str(rollback_error))
                if not isinstance(step_error, Exception):
                    raise step_error
                raise RollbackError(step_error, rollback_error).with_context(
                    pipeline=name,
                    step=_step_name(step),
                    step_index=index,
                ) from step_error
            log.debug("pipeline.rolled_back", step_index=index)
            raise

    try:
        tx.commit()
    except Exception as commit_error:
        log.error("pipeline.commit_failed", error=str(commit_error))
        _discard(tx, log)
        raise CommitError(commit_error).with_context(pipeline=name) from commit_error
    log.debug("pipeline.committed", steps=len(steps))


class Pipeline:
    """A reusable, named, ordered list of steps.

    Example::

        create_order = Pipeline(insert_order, stamp_customer, name="create_order")
        create_order.run(db, order)
    """

    def __init__(self, *steps: Step[Any], name: str | None = None) -> None:
        self.steps: tuple[Step[Any], ...] = steps
        self.name = name

    def then(self, step: Step[Any]) -> Pipeline:
        """Return a new pipeline with *step* appended."""
        return Pipeline(*self.steps, step, name=self.name)

    def run(self, database: Database, target: Any) -> None:
        run_pipeline(database, target, *self.steps, name=self.name)

    def __len__(self) -> int:
        return len(self.steps)

    def __repr__(self) -> str:
        names = ", ".join(_step_name(s) for s in self.steps)
        return f"Pipeline({names}, name={self.name!r})"


__all__ = [
    "Step",
    "run_pipeline",
    "Pipeline",
]
