"""
Pytest configuration and fixtures for Credo SQL tests.
"""

import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

# Set test environment before importing app modules
os.environ["CREDO_SQL_DATA_DIR"] = tempfile.mkdtemp()
os.environ["CREDO_SQL_LOG_LEVEL"] = "DEBUG"

from credo_sql.storage.database import RecordDatabase
from credo_sql.storage.service import SQLiteStorageService
from tests.sample_records import ConnectionRecord


@pytest.fixture
def temp_data_dir() -> Generator[Path, None, None]:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db_path(temp_data_dir: Path) -> Path:
    return temp_data_dir / "db.sqlite"


@pytest.fixture
def database(db_path: Path) -> Generator[RecordDatabase, None, None]:
    """File-backed record database, closed after the test."""
    db = RecordDatabase(db_path)
    yield db
    db.close()


@pytest.fixture
def service(database: RecordDatabase) -> SQLiteStorageService:
    return SQLiteStorageService(database)


@pytest.fixture
def make_connection():
    """Factory for connection records with custom tags."""
    def _make(record_id: str, state: str = "active", **tags) -> ConnectionRecord:
        record = ConnectionRecord(id=record_id, state=state)
        if tags:
            record.set_tags(tags)
        return record
    return _make


@pytest.fixture
def sample_tags() -> dict:
    """Tag map used across evaluator tests."""
    return {
        "state": "active",
        "role": "holder",
        "roles": ["a", "b", "c"],
        "threadId": "t-1",
        "count": 1,
        "verified": True,
    }
