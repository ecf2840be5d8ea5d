"""
Core module - Configuration, errors, types and the record base class.
"""

from credo_sql.core.config import settings, get_logger, setup_logging
from credo_sql.core.errors import (
    CapabilityAlreadyRegisteredError,
    CapabilityNotRegisteredError,
    CredoSqlError,
    InvalidQueryError,
    InvalidTagValueError,
    QueryError,
    QueryUnsupportedError,
    RecordDuplicateError,
    RecordError,
    RecordNotFoundError,
)
from credo_sql.core.records import BaseRecord, GenericRecord, record_class_for
from credo_sql.core.types import Query, QueryOptions, StorageRow, TagMap, TagValue

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "CapabilityAlreadyRegisteredError",
    "CapabilityNotRegisteredError",
    "CredoSqlError",
    "InvalidQueryError",
    "InvalidTagValueError",
    "QueryError",
    "QueryUnsupportedError",
    "RecordDuplicateError",
    "RecordError",
    "RecordNotFoundError",
    "BaseRecord",
    "GenericRecord",
    "record_class_for",
    "Query",
    "QueryOptions",
    "StorageRow",
    "TagMap",
    "TagValue",
]
