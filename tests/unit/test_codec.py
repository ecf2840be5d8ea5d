"""Tests for the record codec."""

import json
from enum import Enum

import pytest

from credo_sql.core.errors import InvalidTagValueError
from credo_sql.core.types import StorageRow
from credo_sql.storage import codec
from tests.sample_records import ConnectionRecord, CredentialRecord


class Role(str, Enum):
    HOLDER = "holder"


class TestNormalizeTags:
    """Tests for tag normalisation at the encode boundary."""

    def test_scalars_and_lists_pass(self):
        """Scalars and flat lists of scalars are kept as-is."""
        tags = {"s": "x", "i": 1, "f": 1.5, "b": False, "l": ["a", 2, True]}

        assert codec.normalize_tags(tags) == tags

    def test_none_values_are_dropped(self):
        """None means the tag is not set."""
        assert codec.normalize_tags({"a": "1", "b": None}) == {"a": "1"}

    def test_enums_and_tuples_are_coerced(self):
        """Enum members become values; tuples become lists."""
        normalized = codec.normalize_tags({"role": Role.HOLDER, "roles": ("a", Role.HOLDER)})

        assert normalized == {"role": "holder", "roles": ["a", "holder"]}

    def test_nested_values_are_rejected(self):
        """Mappings and nested lists are not tag values."""
        with pytest.raises(InvalidTagValueError):
            codec.normalize_tags({"meta": {"a": 1}})
        with pytest.raises(InvalidTagValueError):
            codec.normalize_tags({"matrix": [[1, 2]]})

    def test_rejection_is_a_type_error(self):
        """Callers may catch the standard TypeError."""
        with pytest.raises(TypeError):
            codec.normalize_tags({"when": object()})


class TestEncode:
    """Tests for encode."""

    def test_row_fields(self):
        """id and type come from the record."""
        record = ConnectionRecord(id="c-1", their_label="Alice")

        row = codec.encode(record)

        assert row.id == "c-1"
        assert row.type == "Conn"
        assert row.value["theirLabel"] == "Alice"
        assert row.tags == {"state": "active"}

    def test_tags_are_kept_out_of_value(self):
        """The tag map is encoded only in the tags column."""
        record = ConnectionRecord(id="c-1")
        record.set_tags({"threadId": "t-1"})

        row = codec.encode(record)

        assert "_tags" not in row.value
        assert "threadId" not in json.dumps(row.value)
        assert row.tags == {"threadId": "t-1", "state": "active"}

    def test_explicit_tags_override(self):
        """An explicit tag map replaces get_tags()."""
        record = ConnectionRecord(id="c-1")

        row = codec.encode(record, tags={"only": "this"})

        assert row.tags == {"only": "this"}

    def test_column_text_is_json(self):
        """value and tags serialise to JSON text."""
        record = ConnectionRecord(id="c-1")
        row = codec.encode(record)

        assert json.loads(codec.dumps_value(row)) == row.value
        assert json.loads(codec.dumps_tags(row)) == row.tags


class TestDecode:
    """Tests for decode."""

    def test_round_trip(self):
        """decode(encode(record)) restores id, type, fields and tags."""
        record = ConnectionRecord(id="c-1", state="done", their_label="Bob")
        record.set_tags({"roles": ["x", "y"], "threadId": "t-1"})

        restored = codec.decode(codec.encode(record), ConnectionRecord)

        assert restored.id == record.id
        assert restored.type == record.type
        assert restored.state == "done"
        assert restored.their_label == "Bob"
        assert restored.created_at == record.created_at
        assert restored.get_tags() == record.get_tags()

    def test_row_id_wins(self):
        """The row's id is assigned over the payload's."""
        row = StorageRow(id="row-id", type="Conn", value={"id": "payload-id"}, tags={})

        assert codec.decode(row, ConnectionRecord).id == "row-id"

    def test_row_tags_are_ground_truth(self):
        """Tags embedded in the value payload are ignored."""
        row = StorageRow(
            id="c-1",
            type="Conn",
            value={"id": "c-1", "state": "active", "_tags": {"stale": "yes"}},
            tags={"threadId": "t-2"},
        )

        record = codec.decode(row, ConnectionRecord)

        assert record.get_tags() == {"threadId": "t-2", "state": "active"}

    def test_decode_other_type(self):
        """Any record class can be decoded from a row."""
        row = StorageRow(id="cred-1", type="Credential", value={"schemaName": "license"}, tags={})

        record = codec.decode(row, CredentialRecord)

        assert record.schema_name == "license"


class TestRowFromDb:
    """Tests for parsing raw table rows."""

    def test_parses_json_columns(self):
        """value and tags columns are JSON-decoded."""
        raw = {
            "id": "c-1",
            "type": "Conn",
            "value": '{"id":"c-1","state":"active"}',
            "tags": '{"roles":["a","b"]}',
        }

        row = codec.row_from_db(raw)

        assert row.value == {"id": "c-1", "state": "active"}
        assert row.tags == {"roles": ["a", "b"]}
