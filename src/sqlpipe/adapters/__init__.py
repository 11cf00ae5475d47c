"""Database adapters -- concrete databases behind the sqlpipe protocols.

Architecture::

    DatabaseAdapter (base.py)       Abstract base: lifecycle, handle(), begin()
        |-- SQLiteAdapter           stdlib sqlite3, explicit BEGIN
        |-- EngineAdapter           SQLAlchemy Engine (pooled, any backend)

    DBAPIHandle / DBAPITransaction  (dbapi.py)   any DB-API 2.0 connection
    EngineHandle / EngineTransaction (engine.py) SQLAlchemy connections

Modules
-------
base            Abstract DatabaseAdapter base class
dbapi           Handles over a raw DB-API connection
sqlite          SQLite adapter
engine          SQLAlchemy engine adapter + create_engine()
"""

from .base import DatabaseAdapter
from .dbapi import DBAPIHandle, DBAPITransaction
from .engine import EngineAdapter, EngineHandle, EngineTransaction, create_engine
from .sqlite import SQLiteAdapter

__all__ = [
    "DatabaseAdapter",
    "DBAPIHandle",
    "DBAPITransaction",
    "SQLiteAdapter",
    "EngineAdapter",
    "EngineHandle",
    "EngineTransaction",
    "create_engine",
]
