"""
Record base class and plain-object serialization.

A record is a typed pydantic model with:
- a unique id (caller supplied, defaults to a UUID4 string)
- a class-level type discriminator
- created/updated timestamps
- a private tag map that is persisted separately from the value payload
"""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, ClassVar, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel

from credo_sql.core.types import TagMap, TagValue

R = TypeVar("R", bound="BaseRecord")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """
    Format a datetime as an ISO-8601 UTC string with millisecond precision.

    Naive datetimes are taken to be UTC. The output matches JavaScript's
    ``Date.toISOString`` (``2024-01-31T09:15:00.000Z``).
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc_value = value.astimezone(timezone.utc)
    return utc_value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BaseRecord(BaseModel):
    """
    Base class for all stored records.

    Subclasses set ``type`` and usually override ``get_tags`` to add tags
    derived from their own fields on top of the custom tags.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    type: ClassVar[str] = "BaseRecord"

    id: str = Field(default_factory=lambda: str(uuid4()))
    """Unique identifier, primary key of the records table."""

    created_at: datetime = Field(default_factory=utc_now)
    """When the record was created."""

    updated_at: datetime | None = None
    """When the record was last written. Set by the storage service."""

    _tags: TagMap = PrivateAttr(default_factory=dict)

    def get_tags(self) -> TagMap:
        """Return all tags of the record: custom tags plus derived ones."""
        return dict(self._tags)

    def get_tag(self, name: str) -> TagValue | None:
        return self.get_tags().get(name)

    def set_tag(self, name: str, value: TagValue) -> None:
        self._tags[name] = value

    def set_tags(self, tags: TagMap) -> None:
        """Merge ``tags`` into the custom tags."""
        self._tags = {**self._tags, **tags}

    def replace_tags(self, tags: TagMap) -> None:
        """Replace the custom tags wholesale."""
        self._tags = dict(tags)


def serialize_to_plain_object(instance: BaseRecord) -> dict[str, Any]:
    """Dump a record to a JSON-safe dict with camelCase keys. Tags are not included."""
    return instance.model_dump(mode="json", by_alias=True)


def deserialize_from_plain_object(obj: dict[str, Any], record_class: type[R]) -> R:
    """Build a record of ``record_class`` from a plain dict."""
    return record_class.model_validate(obj)


class GenericRecord(BaseRecord):
    """Record that keeps whatever fields its payload carries."""

    model_config = ConfigDict(extra="allow")

    type: ClassVar[str] = "GenericRecord"


@lru_cache(maxsize=None)
def record_class_for(type_name: str) -> type[GenericRecord]:
    """Build (once per name) a permissive record class for an arbitrary type."""
    namespace = {"type": type_name, "__module__": __name__}
    return type(f"{type_name}Record", (GenericRecord,), namespace)
