"""
Storage Layer - SQLite records table, codec, query evaluation.

The storage hierarchy:
1. RecordDatabase → the single shared SQLite handle and records table
2. codec → typed records to/from rows (value and tags encoded apart)
3. query → in-memory tag query evaluation
4. SQLiteStorageService → async CRUD and queries built on the above

All record persistence should go through SQLiteStorageService.
"""

from credo_sql.storage.database import RecordDatabase
from credo_sql.storage.service import SQLiteStorageService

__all__ = [
    "RecordDatabase",
    "SQLiteStorageService",
]
