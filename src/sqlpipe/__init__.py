"""
sqlpipe: a thin helper layer over relational database connections.

- **Protocols:** ``Handle`` (execute/query/query_one) satisfied by both
  plain database handles and transactions
- **Statements:** SQLAlchemy Core constructs rendered to positional SQL by
  ``StatementBuilder``
- **Execution:** ``execute``, ``query``, ``query_one``
- **Qualifiers:** ``by_eq``, ``by_id``, ``qualify`` for composing filters
- **Pipelines:** ``run_pipeline`` runs ordered steps in one transaction
- **Versionable:** optional optimistic-concurrency version tag

Usage::

    from sqlalchemy import select
    from sqlpipe import by_id, connect, qualify, query_one

    db = connect("sqlite:///app.db")
    row = query_one(qualify(select(users), by_id(5)), db).scan()
"""

from sqlpipe.adapters import DatabaseAdapter, EngineAdapter, SQLiteAdapter
from sqlpipe.connection import ConnectionInfo, connect
from sqlpipe.errors import (
    CommitError,
    ConfigError,
    DatabaseConnectionError,
    DatabaseError,
    NoRowsError,
    PipelineError,
    RollbackError,
    SqlpipeError,
    StatementBuildError,
)
from sqlpipe.execution import execute, query, query_one
from sqlpipe.pipeline import Pipeline, Step, run_pipeline
from sqlpipe.protocols import DB, Database, Execer, Handle, Queryer, Sqlizer, Transaction
from sqlpipe.qualifier import Qualifier, by_eq, by_equality, by_id, qualify
from sqlpipe.results import ExecResult, Row, RowSet
from sqlpipe.statement import RawStatement, StatementBuilder, sqlize
from sqlpipe.versionable import VERSION_COLUMN, Versionable, by_version, make_versionable

__version__ = "0.1.0"

__all__ = [
    # Protocols
    "Execer",
    "Queryer",
    "Handle",
    "DB",
    "Transaction",
    "Database",
    "Sqlizer",
    # Results
    "ExecResult",
    "RowSet",
    "Row",
    # Statements
    "StatementBuilder",
    "RawStatement",
    "sqlize",
    # Execution
    "execute",
    "query",
    "query_one",
    # Qualifiers
    "Qualifier",
    "by_eq",
    "by_equality",
    "by_id",
    "qualify",
    # Versionable
    "VERSION_COLUMN",
    "Versionable",
    "make_versionable",
    "by_version",
    # Pipeline
    "Step",
    "run_pipeline",
    "Pipeline",
    # Adapters
    "DatabaseAdapter",
    "SQLiteAdapter",
    "EngineAdapter",
    "ConnectionInfo",
    "connect",
    # Errors
    "SqlpipeError",
    "ConfigError",
    "StatementBuildError",
    "DatabaseError",
    "DatabaseConnectionError",
    "NoRowsError",
    "PipelineError",
    "RollbackError",
    "CommitError",
]
