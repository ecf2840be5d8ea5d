"""
Core type definitions for Credo SQL.

These types describe what crosses the storage boundary:
- Tag values and tag maps
- Queries over tag maps and their paging options
- The persisted row shape
"""

from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, Field


# ============================================
# Tags
# ============================================

Scalar = Union[str, int, float, bool]
"""A single tag value."""

TagValue = Union[Scalar, list[Scalar]]
"""A tag value is either a scalar or an ordered list of scalars."""

TagMap = dict[str, TagValue]
"""Mapping from tag key to tag value."""

CREATED_AT_TAG = "created_at"
UPDATED_AT_TAG = "updated_at"


# ============================================
# Queries
# ============================================

Query = Mapping[str, Any]
"""
A query node.

Plain keys are tag clauses (AND-ed together). The reserved keys
``$and`` and ``$or`` hold lists of sub-queries; ``$not`` is rejected.
A clause whose value is None places no constraint.
"""

AND = "$and"
OR = "$or"
NOT = "$not"
COMBINATORS = (AND, OR, NOT)


class QueryOptions(BaseModel):
    """Paging applied after a query has been filtered."""

    limit: int | None = Field(default=None, ge=0)
    """Maximum number of records returned."""

    offset: int | None = Field(default=None, ge=0)
    """Number of filtered records skipped before taking limit."""


# ============================================
# Persisted Rows
# ============================================

class StorageRow(BaseModel):
    """A row of the records table with its JSON columns decoded."""

    id: str
    type: str
    value: dict[str, Any] = Field(default_factory=dict)
    """Serialized application payload, opaque to the storage layer."""

    tags: dict[str, Any] = Field(default_factory=dict)
    """Decoded tag map. Rows written elsewhere are read as-is."""
