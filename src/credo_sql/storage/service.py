"""
SQLite storage service - async CRUD and tag queries over the records table.

Every public operation issues exactly one statement against the shared
RecordDatabase, run on a worker thread so the event loop is not blocked.
Query filtering happens in memory on the decoded tag maps.
"""

import asyncio
import sqlite3
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from credo_sql.core.config import get_logger
from credo_sql.core.errors import RecordDuplicateError, RecordNotFoundError
from credo_sql.core.records import BaseRecord, to_iso, utc_now
from credo_sql.core.types import (
    CREATED_AT_TAG,
    UPDATED_AT_TAG,
    Query,
    QueryOptions,
    StorageRow,
    TagMap,
)
from credo_sql.storage import codec
from credo_sql.storage.database import TABLE_NAME, RecordDatabase, is_unique_violation
from credo_sql.storage.query import filter_by_query, validate_query

logger = get_logger("storage.service")

T = TypeVar("T", bound=BaseRecord)


def _timestamp_tags(record: BaseRecord) -> TagMap:
    """created_at/updated_at tags from the record, or now if they are unusable."""
    try:
        return {
            CREATED_AT_TAG: to_iso(record.created_at),
            UPDATED_AT_TAG: to_iso(record.updated_at),
        }
    except (AttributeError, TypeError, ValueError):
        now = to_iso(utc_now())
        return {CREATED_AT_TAG: now, UPDATED_AT_TAG: now}


def _tags_for_save(record: BaseRecord) -> TagMap:
    """
    The record's tags merged with its timestamp tags.

    A failing tag accessor must never abort a save: if get_tags() raises,
    the result holds only the two timestamp tags. Tag values that cannot
    be stored still raise InvalidTagValueError.
    """
    timestamps = _timestamp_tags(record)
    try:
        raw_tags = record.get_tags()
    except Exception as e:
        logger.warning(f"Could not read tags of {record.type} {record.id}, saving timestamps only: {e}")
        return timestamps
    return {**codec.normalize_tags(raw_tags), **timestamps}


def _coerce_options(options: QueryOptions | Mapping[str, Any] | None) -> QueryOptions:
    if options is None:
        return QueryOptions()
    if isinstance(options, QueryOptions):
        return options
    return QueryOptions.model_validate(options)


class SQLiteStorageService(Generic[T]):
    """
    Storage service backed by a single SQLite table.

    Overlapping operations are safe: each statement runs under the
    database lock in a transaction of its own.
    """

    def __init__(self, database: RecordDatabase | None = None):
        """Initialize the service, opening the default database if none is given."""
        self.database = database or RecordDatabase()

    async def _execute(self, sql: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        return await asyncio.to_thread(self.database.execute, sql, params)

    # ==========================================
    # Writes
    # ==========================================

    async def save(self, record: T) -> None:
        """
        Insert a new record.

        Raises:
            RecordDuplicateError: If a row with the same id already exists.
            InvalidTagValueError: If a tag value is not a scalar or a list of scalars.
        """
        record.updated_at = utc_now()
        tags = _tags_for_save(record)
        record.set_tags(tags)

        row = codec.encode(record, tags=tags)
        try:
            await self._execute(
                f"INSERT INTO {TABLE_NAME} (id, type, value, tags) VALUES (?, ?, ?, ?)",
                (row.id, row.type, codec.dumps_value(row), codec.dumps_tags(row)),
            )
        except sqlite3.IntegrityError as e:
            if is_unique_violation(e):
                raise RecordDuplicateError(
                    f"Record with id {record.id} already exists",
                    record_type=record.type,
                ) from e
            raise

        logger.debug(f"Saved {record.type} {record.id}")

    async def update(self, record: T) -> None:
        """
        Overwrite the value and tags of an existing record.

        Updating an id that was never saved is a silent no-op.
        """
        record.updated_at = utc_now()
        record.set_tag(UPDATED_AT_TAG, to_iso(record.updated_at))
        row = codec.encode(record)
        await self._execute(
            f"UPDATE {TABLE_NAME} SET value = ?, tags = ? WHERE id = ?",
            (codec.dumps_value(row), codec.dumps_tags(row), row.id),
        )
        logger.debug(f"Updated {record.type} {record.id}")

    async def delete(self, record: T) -> None:
        """Delete a record. Missing rows are ignored."""
        await self.delete_by_id(type(record), record.id)

    async def delete_by_id(self, record_class: type[T], record_id: str) -> None:
        """Delete the row with the given id. Missing rows are ignored."""
        await self._execute(f"DELETE FROM {TABLE_NAME} WHERE id = ?", (record_id,))
        logger.debug(f"Deleted {record_class.type} {record_id}")

    # ==========================================
    # Reads
    # ==========================================

    async def get_by_id(self, record_class: type[T], record_id: str) -> T:
        """
        Fetch one record by id.

        Raises:
            RecordNotFoundError: If no row has this id.
        """
        rows = await self._execute(f"SELECT * FROM {TABLE_NAME} WHERE id = ?", (record_id,))
        if not rows:
            raise RecordNotFoundError(
                f"record with id {record_id} not found.",
                record_type=record_class.type,
            )
        return codec.decode(codec.row_from_db(rows[0]), record_class)

    async def get_all(self, record_class: type[T]) -> list[T]:
        """All records of the class's type, in table order."""
        rows = await self._select_type(record_class)
        return [codec.decode(row, record_class) for row in rows]

    async def find_by_query(
        self,
        record_class: type[T],
        query: Query,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> list[T]:
        """
        Records of the class's type whose tags satisfy ``query``.

        ``offset`` and ``limit`` are applied to the filtered list.

        Raises:
            QueryUnsupportedError: If the query uses $not anywhere.
        """
        validate_query(query)
        paging = _coerce_options(options)

        rows = await self._select_type(record_class)
        filtered = filter_by_query(rows, query)

        start = paging.offset or 0
        if paging.limit is not None:
            sliced = filtered[start:start + paging.limit]
        else:
            sliced = filtered[start:]

        logger.debug(
            f"Query on {record_class.type}: {len(rows)} rows, "
            f"{len(filtered)} matched, {len(sliced)} returned"
        )
        return [codec.decode(row, record_class) for row in sliced]

    async def _select_type(self, record_class: type[T]) -> list[StorageRow]:
        rows = await self._execute(
            f"SELECT * FROM {TABLE_NAME} WHERE type = ? ORDER BY rowid",
            (record_class.type,),
        )
        return [codec.row_from_db(row) for row in rows]

    def close(self) -> None:
        """Close the shared database handle."""
        self.database.close()
