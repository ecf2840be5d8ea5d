"""
Record codec - typed records to and from persisted rows.

The value payload and the tag map are encoded separately. On decode the
row's tags win over anything embedded in the value payload, because tags
can be derived or denormalized independently of the value.
"""

import json
import sqlite3
from collections.abc import Mapping
from enum import Enum
from typing import Any, TypeVar

from credo_sql.core.errors import InvalidTagValueError
from credo_sql.core.records import (
    BaseRecord,
    deserialize_from_plain_object,
    serialize_to_plain_object,
)
from credo_sql.core.types import Scalar, StorageRow, TagMap, TagValue

R = TypeVar("R", bound=BaseRecord)

# Key under which other implementations embed the tag map in the value payload.
EMBEDDED_TAGS_KEY = "_tags"


def _normalize_scalar(key: str, value: Any) -> Scalar:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, (str, int, float, bool)):
        return value
    raise InvalidTagValueError(
        f"Tag {key!r} has unsupported value of type {type(value).__name__}"
    )


def _normalize_tag_value(key: str, value: Any) -> TagValue:
    if isinstance(value, (list, tuple)):
        return [_normalize_scalar(key, item) for item in value]
    return _normalize_scalar(key, value)


def normalize_tags(tags: Mapping[str, Any]) -> TagMap:
    """
    Coerce a tag mapping into a TagMap.

    None values are dropped, enum members become their values and tuples
    become lists. Anything else that is not a scalar or a flat sequence
    of scalars raises InvalidTagValueError.
    """
    normalized: TagMap = {}
    for key, value in tags.items():
        if value is None:
            continue
        normalized[str(key)] = _normalize_tag_value(key, value)
    return normalized


def encode(record: BaseRecord, tags: Mapping[str, Any] | None = None) -> StorageRow:
    """
    Convert a record to its persisted form.

    Args:
        record: The record to encode.
        tags: Tag map to persist instead of ``record.get_tags()``.
    """
    value = serialize_to_plain_object(record)
    value.pop(EMBEDDED_TAGS_KEY, None)
    raw_tags = record.get_tags() if tags is None else tags
    return StorageRow(
        id=record.id,
        type=record.type,
        value=value,
        tags=normalize_tags(raw_tags),
    )


def decode(row: StorageRow, record_class: type[R]) -> R:
    """Build a typed record from a row; the row's id and tags are authoritative."""
    value = {k: v for k, v in row.value.items() if k != EMBEDDED_TAGS_KEY}
    instance = deserialize_from_plain_object(value, record_class)
    instance.id = row.id
    instance.replace_tags(row.tags)
    return instance


def dumps_value(row: StorageRow) -> str:
    return json.dumps(row.value, separators=(",", ":"))


def dumps_tags(row: StorageRow) -> str:
    return json.dumps(row.tags, separators=(",", ":"))


def row_from_db(db_row: sqlite3.Row | Mapping[str, Any]) -> StorageRow:
    """Parse a raw records-table row, decoding its JSON columns."""
    return StorageRow(
        id=db_row["id"],
        type=db_row["type"],
        value=json.loads(db_row["value"]),
        tags=json.loads(db_row["tags"]),
    )
