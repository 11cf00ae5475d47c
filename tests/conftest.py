"""
Shared pytest fixtures for sqlpipe tests.

Provides:
- An in-memory SQLite adapter with a ``users`` table
- A file-backed SQLAlchemy engine adapter with the same table
- Lightweight SQLAlchemy table clauses for building statements
- Isolation of structlog configuration and cached settings
"""

import sys
from pathlib import Path

import pytest
import structlog
from sqlalchemy import column, table

# Ensure sqlpipe package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlpipe.adapters import EngineAdapter, SQLiteAdapter
from sqlpipe.settings import clear_settings_cache
from sqlpipe.statement import StatementBuilder, reset_default_builder

USERS_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT,
    _version INTEGER
)
"""


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_globals():
    """Reset structlog, cached settings and the default builder around each test."""
    structlog.reset_defaults()
    clear_settings_cache()
    reset_default_builder()
    yield
    structlog.reset_defaults()
    clear_settings_cache()
    reset_default_builder()


# =============================================================================
# Statements
# =============================================================================


@pytest.fixture
def users():
    """``users`` table clause matching USERS_DDL."""
    return table("users", column("id"), column("name"), column("email"), column("_version"))


@pytest.fixture
def builder():
    """SQLite builder with diagnostics off."""
    return StatementBuilder()


# =============================================================================
# Databases
# =============================================================================


@pytest.fixture
def db():
    """In-memory SQLite adapter with the users table created."""
    adapter = SQLiteAdapter(":memory:")
    adapter.connect()
    adapter.execute(USERS_DDL)
    yield adapter
    adapter.disconnect()


@pytest.fixture
def engine_db(tmp_path):
    """SQLAlchemy engine adapter over a temporary SQLite file."""
    adapter = EngineAdapter.from_url(f"sqlite:///{tmp_path / 'engine.db'}")
    adapter.connect()
    adapter.execute(USERS_DDL)
    yield adapter
    adapter.disconnect()
