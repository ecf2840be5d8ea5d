"""
Tag query evaluation.

Queries are evaluated in memory against decoded tag maps:
- plain clauses are AND-ed; a list value means subset containment
- $and requires every sub-query to match (an empty list passes)
- $or requires at least one sub-query to match (an empty list fails)
- $not is rejected outright
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from credo_sql.core.errors import InvalidQueryError, QueryUnsupportedError
from credo_sql.core.types import AND, COMBINATORS, NOT, OR, Query, StorageRow

_MISSING = object()


def _strict_equal(left: Any, right: Any) -> bool:
    """
    Equality without coercion.

    Strings never equal numbers and booleans never equal numbers, but
    1 == 1.0 since JSON has a single number type.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return type(left) is type(right) and left == right


def _contains(haystack: Sequence[Any], needle: Any) -> bool:
    return any(_strict_equal(item, needle) for item in haystack)


def _split(query: Query) -> tuple[dict[str, Any], Any, Any, Any]:
    clauses = {k: v for k, v in query.items() if k not in COMBINATORS}
    return clauses, query.get(AND), query.get(OR), query.get(NOT)


def _subqueries(value: Any, combinator: str) -> list[Query]:
    if not isinstance(value, (list, tuple)):
        raise InvalidQueryError(f"{combinator} expects a list of queries, got {type(value).__name__}")
    for sub in value:
        if not isinstance(sub, Mapping):
            raise InvalidQueryError(f"{combinator} entries must be queries, got {type(sub).__name__}")
    return list(value)


def match_simple_query(tags: Mapping[str, Any], clauses: Mapping[str, Any]) -> bool:
    """Evaluate plain clauses as a conjunction, skipping None values."""
    for key, value in clauses.items():
        if value is None:
            continue

        tag_value = tags.get(key, _MISSING)
        if isinstance(value, (list, tuple)):
            if not isinstance(tag_value, list):
                return False
            if not all(_contains(tag_value, item) for item in value):
                return False
        elif tag_value is _MISSING or not _strict_equal(tag_value, value):
            return False

    return True


def matches(tags: Mapping[str, Any], query: Query) -> bool:
    """
    Whether a tag map satisfies a query.

    Raises:
        QueryUnsupportedError: If the node carries a $not.
        InvalidQueryError: If $and / $or is not a list of queries.
    """
    if not isinstance(query, Mapping):
        raise InvalidQueryError(f"Query must be a mapping, got {type(query).__name__}")

    clauses, and_queries, or_queries, not_query = _split(query)

    if not_query is not None:
        raise QueryUnsupportedError("$not query not supported in SQLite storage")

    if not match_simple_query(tags, clauses):
        return False

    if and_queries is not None:
        if not all(matches(tags, sub) for sub in _subqueries(and_queries, AND)):
            return False

    if or_queries is not None:
        if not any(matches(tags, sub) for sub in _subqueries(or_queries, OR)):
            return False

    return True


def validate_query(query: Query) -> None:
    """
    Check a whole query tree up front.

    Unlike ``matches`` this visits every branch, so a $not nested under
    a short-circuited $or is still reported.
    """
    if not isinstance(query, Mapping):
        raise InvalidQueryError(f"Query must be a mapping, got {type(query).__name__}")

    _, and_queries, or_queries, not_query = _split(query)
    if not_query is not None:
        raise QueryUnsupportedError("$not query not supported in SQLite storage")

    for combinator, value in ((AND, and_queries), (OR, or_queries)):
        if value is None:
            continue
        for sub in _subqueries(value, combinator):
            validate_query(sub)


def filter_by_query(rows: Iterable[StorageRow], query: Query) -> list[StorageRow]:
    """Rows whose tags satisfy the query, in their original order."""
    return [row for row in rows if matches(row.tags, query)]
