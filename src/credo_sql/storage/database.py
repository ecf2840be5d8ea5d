"""
SQLite record database - the single table every record lives in.

Schema (shared with other implementations, must not drift):
- records(id TEXT PRIMARY KEY, type, value, tags)

`value` and `tags` are JSON text. The database owns one connection for
its whole lifetime; every statement runs in its own transaction, and
statements from different threads are serialized on a lock.
"""

import sqlite3
import threading
from pathlib import Path
from typing import Any, Sequence

from credo_sql.core.config import settings, get_logger

logger = get_logger("storage.database")

TABLE_NAME = "records"

SCHEMA_SQL = f"""
    CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
        id TEXT PRIMARY KEY,
        type TEXT NOT NULL,
        value TEXT NOT NULL,
        tags TEXT NOT NULL
    )
"""

UNIQUE_VIOLATION = "UNIQUE constraint failed"


def is_unique_violation(error: BaseException) -> bool:
    """Whether an SQLite error is a primary key / unique conflict."""
    return isinstance(error, sqlite3.IntegrityError) and UNIQUE_VIOLATION in str(error)


class RecordDatabase:
    """
    Shared SQLite handle for the records table.

    Pass ``":memory:"`` as the path for a private in-memory database.
    """

    def __init__(self, db_path: Path | str | None = None):
        """Open the database and create the records table if needed."""
        path = db_path if db_path is not None else settings.db_path
        self.db_path = str(path)
        self._lock = threading.Lock()
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            # Worker threads share this connection; access goes through _lock.
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._init_db()
        except sqlite3.Error as e:
            logger.error(f"Failed to open database {self.db_path}: {e}")
            raise

        logger.info(f"Database opened successfully: {self.db_path}")

    def _init_db(self) -> None:
        """Initialize the database schema."""
        with self._conn:
            self._conn.execute(SCHEMA_SQL)

    def execute(self, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        """
        Run one statement in its own transaction.

        Commits on success and rolls back on error. Returns fetched rows
        (empty for statements that return none).
        """
        with self._lock, self._conn:
            cursor = self._conn.execute(sql, tuple(params))
            return cursor.fetchall()

    def count_by_type(self) -> dict[str, int]:
        """Row counts grouped by record type."""
        rows = self.execute(
            f"SELECT type, COUNT(*) AS count FROM {TABLE_NAME} GROUP BY type ORDER BY type"
        )
        return {row["type"]: row["count"] for row in rows}

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        logger.debug(f"Closed database {self.db_path}")
