"""
Credo SQL

SQLite-backed record storage for agent wallets.
Typed records are persisted with a tag map and found by tag queries.
"""

__version__ = "0.1.0"

from credo_sql.core.config import settings
from credo_sql.core.errors import (
    CredoSqlError,
    QueryUnsupportedError,
    RecordDuplicateError,
    RecordNotFoundError,
)
from credo_sql.core.records import BaseRecord
from credo_sql.core.types import Query, QueryOptions
from credo_sql.module import CapabilityRegistry, SQLWalletModule
from credo_sql.storage import RecordDatabase, SQLiteStorageService

__all__ = [
    "settings",
    "CredoSqlError",
    "QueryUnsupportedError",
    "RecordDuplicateError",
    "RecordNotFoundError",
    "BaseRecord",
    "Query",
    "QueryOptions",
    "CapabilityRegistry",
    "SQLWalletModule",
    "RecordDatabase",
    "SQLiteStorageService",
]
