"""
Structured error types for sqlpipe.

Every failure raised by the statement builder, the execution primitives,
the adapters or the transaction pipeline is a :class:`SqlpipeError`
subclass carrying:

- **Category:** what kind of failure (database, build, pipeline, config)
- **Retryable:** whether the same call may succeed if simply repeated
- **Context:** structured metadata (statement text, step, pipeline)
- **Cause:** the chained driver/library exception

Driver errors raised while executing a statement are NOT wrapped: they
propagate verbatim so callers can catch the driver's own exception types.
Wrapping happens only where sqlpipe itself adds meaning (a statement that
could not be built, a commit that did not go through).

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                        SqlpipeError                          │
        │           (category, retryable, context, cause)              │
        ├──────────────────────────────────────────────────────────────┤
        │  ConfigError        StatementBuildError     DatabaseError    │
        │  (CONFIG)           (BUILD)                 (DATABASE)       │
        │                                                  │           │
        │                              DatabaseConnectionError         │
        │                              NoRowsError                     │
        │                                                              │
        │  PipelineError (PIPELINE)                                    │
        │       │                                                      │
        │  RollbackError   CommitError                                 │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = StatementBuildError("missing bind value")
    >>> error.retryable
    False
    >>> error.with_context(sql="SELECT 1").context.sql
    'SELECT 1'

Tags:
    error-handling, exception-hierarchy, error-context, sqlpipe
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    # Infrastructure errors
    DATABASE = "DATABASE"         # Connection, driver, constraint
    # Caller errors
    BUILD = "BUILD"               # Statement could not be turned into SQL
    CONFIG = "CONFIG"             # Missing or invalid settings
    # Application errors
    PIPELINE = "PIPELINE"         # Transaction pipeline finalization
    # Internal errors
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        pipeline: Name of the pipeline that was running
        step: Name of the pipeline step that failed
        step_index: 1-based position of the failing step
        sql: Generated statement text, when one exists
        metadata: Additional key-value pairs
    """

    pipeline: str | None = None
    step: str | None = None
    step_index: int | None = None
    sql: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["pipeline", "step", "step_index", "sql"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SqlpipeError(Exception):
    """
    Base exception for all sqlpipe errors.

    Subclasses set ``default_category`` and ``default_retryable`` to give
    sensible defaults for their domain.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SqlpipeError:
        """
        Add context to this error (fluent API).

        Usage:
            raise StatementBuildError("bad statement").with_context(sql=text)
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION / BUILD ERRORS (never retryable)
# =============================================================================


class ConfigError(SqlpipeError):
    """Invalid configuration (unsupported dialect, bad URL, etc.)."""

    default_category = ErrorCategory.CONFIG


class StatementBuildError(SqlpipeError):
    """A statement could not be rendered into SQL text and arguments."""

    default_category = ErrorCategory.BUILD


# =============================================================================
# DATABASE ERRORS
# =============================================================================


class DatabaseError(SqlpipeError):
    """Database-level error raised by sqlpipe itself."""

    default_category = ErrorCategory.DATABASE


class DatabaseConnectionError(DatabaseError):
    """Could not open a connection to the database."""

    default_retryable = True


class NoRowsError(DatabaseError):
    """A single-row query matched nothing."""

    def __init__(self, message: str = "no rows in result set", **kwargs: Any):
        super().__init__(message, **kwargs)


# =============================================================================
# PIPELINE ERRORS
# =============================================================================


class PipelineError(SqlpipeError):
    """Failure while finalizing a transaction pipeline."""

    default_category = ErrorCategory.PIPELINE


class RollbackError(PipelineError):
    """
    A step failed and the rollback that followed failed too.

    The transaction outcome is unknown to sqlpipe; ``step_error`` is what
    triggered the abort and ``rollback_error`` is what the driver raised
    while cleaning up.
    """

    def __init__(
        self,
        step_error: BaseException,
        rollback_error: BaseException,
        **kwargs: Any,
    ):
        super().__init__(
            f"step failed ({step_error!r}) and rollback failed ({rollback_error!r})",
            cause=step_error,
            **kwargs,
        )
        self.step_error = step_error
        self.rollback_error = rollback_error


class CommitError(PipelineError):
    """Every step succeeded but the commit did not go through."""

    default_retryable = True

    def __init__(self, commit_error: BaseException, **kwargs: Any):
        super().__init__(f"commit failed: {commit_error}", cause=commit_error, **kwargs)
        self.commit_error = commit_error


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: BaseException) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, SqlpipeError):
        return error.retryable
    return isinstance(error, (ConnectionError, TimeoutError))


def categorize_error(error: BaseException) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, SqlpipeError):
        return error.category
    if isinstance(error, ConnectionError):
        return ErrorCategory.DATABASE
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SqlpipeError",
    "ConfigError",
    "StatementBuildError",
    "DatabaseError",
    "DatabaseConnectionError",
    "NoRowsError",
    "PipelineError",
    "RollbackError",
    "CommitError",
    "is_retryable",
    "categorize_error",
]
