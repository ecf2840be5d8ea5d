"""
Credo SQL exception hierarchy.

Every failure raised by this package derives from CredoSqlError.
SQLite errors are not wrapped; they reach the caller unmodified.
"""


class CredoSqlError(Exception):
    """Base exception for all Credo SQL failures."""


class RecordError(CredoSqlError):
    """Raised for failures tied to a specific record type."""

    def __init__(self, message: str, record_type: str | None = None):
        super().__init__(message)
        self.record_type = record_type


class RecordNotFoundError(RecordError):
    """Raised when no row exists for the requested id."""


class RecordDuplicateError(RecordError):
    """Raised when a save would overwrite an existing id."""


class QueryError(CredoSqlError):
    """Raised for queries the evaluator cannot run."""


class QueryUnsupportedError(QueryError):
    """Raised when a query uses the $not combinator."""


class InvalidQueryError(QueryError):
    """Raised for structurally malformed queries."""


class InvalidTagValueError(CredoSqlError, TypeError):
    """Raised when a tag value is not a scalar or a list of scalars."""


class CapabilityAlreadyRegisteredError(CredoSqlError):
    """Raised when a second provider is registered for a capability."""

    def __init__(self, capability: str):
        super().__init__(f"There is an instance of {capability} already registered")
        self.capability = capability


class CapabilityNotRegisteredError(CredoSqlError, LookupError):
    """Raised when resolving a capability nobody provides."""
