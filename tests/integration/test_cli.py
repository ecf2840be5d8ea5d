"""Integration tests for the command-line interface."""

import asyncio

import pytest
from typer.testing import CliRunner

from credo_sql.interface.cli import app
from credo_sql.storage.database import RecordDatabase
from credo_sql.storage.service import SQLiteStorageService
from tests.sample_records import ConnectionRecord, CredentialRecord

runner = CliRunner()


@pytest.fixture
def populated_db(db_path):
    """Database file holding two connections and one credential."""
    service = SQLiteStorageService(RecordDatabase(db_path))

    async def _populate():
        for record_id, state in (("conn-1", "active"), ("conn-2", "done")):
            record = ConnectionRecord(id=record_id, state=state)
            record.set_tags({"roles": ["x"]})
            await service.save(record)
        await service.save(CredentialRecord(id="cred-1"))

    asyncio.run(_populate())
    service.close()
    return db_path


class TestCli:
    """Tests for credo-sql commands."""

    def test_init_creates_table(self, db_path):
        """init creates the database file."""
        result = runner.invoke(app, ["init", "--db", str(db_path)])

        assert result.exit_code == 0
        assert db_path.exists()
        assert "Records table ready" in result.output

    def test_status_counts(self, populated_db):
        """status lists counts per type."""
        result = runner.invoke(app, ["status", "--db", str(populated_db)])

        assert result.exit_code == 0
        assert "Conn: 2" in result.output
        assert "Credential: 1" in result.output

    def test_list(self, populated_db):
        """list shows records of one type."""
        result = runner.invoke(app, ["list", "Conn", "--db", str(populated_db)])

        assert result.exit_code == 0
        assert "conn-1" in result.output
        assert "conn-2" in result.output
        assert "cred-1" not in result.output

    def test_show(self, populated_db):
        """show prints value and tags of one record."""
        result = runner.invoke(app, ["show", "conn-2", "--db", str(populated_db)])

        assert result.exit_code == 0
        assert "Conn" in result.output
        assert '"done"' in result.output

    def test_show_missing(self, populated_db):
        """show fails for unknown ids."""
        result = runner.invoke(app, ["show", "nope", "--db", str(populated_db)])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_find(self, populated_db):
        """find runs a tag query."""
        result = runner.invoke(app, ["find", "Conn", '{"state": "done"}', "--db", str(populated_db)])

        assert result.exit_code == 0
        assert "conn-2" in result.output
        assert "conn-1" not in result.output

    def test_find_with_paging(self, populated_db):
        """--offset and --limit page through matches."""
        result = runner.invoke(
            app,
            ["find", "Conn", '{"roles": ["x"]}', "--offset", "1", "--limit", "1", "--db", str(populated_db)],
        )

        assert result.exit_code == 0
        assert "conn-2" in result.output
        assert "conn-1" not in result.output

    def test_find_rejects_not(self, populated_db):
        """$not queries exit with a usage error."""
        result = runner.invoke(app, ["find", "Conn", '{"$not": {"state": "done"}}', "--db", str(populated_db)])

        assert result.exit_code == 2
        assert "not supported" in result.output

    def test_find_invalid_json(self, populated_db):
        """Malformed query JSON is reported."""
        result = runner.invoke(app, ["find", "Conn", "{state", "--db", str(populated_db)])

        assert result.exit_code == 2
        assert "invalid query JSON" in result.output

    def test_delete(self, populated_db):
        """delete removes the row and reports its stored type."""
        result = runner.invoke(app, ["delete", "conn-1", "--db", str(populated_db)])
        listing = runner.invoke(app, ["list", "Conn", "--db", str(populated_db)])

        assert result.exit_code == 0
        assert "(Conn)" in result.output
        assert "conn-1" not in listing.output
        assert "conn-2" in listing.output

    def test_delete_logs_stored_type(self, populated_db, caplog):
        """The deletion is logged under the row's own type."""
        with caplog.at_level("DEBUG", logger="credo_sql.storage.service"):
            result = runner.invoke(app, ["delete", "cred-1", "--db", str(populated_db)])

        assert result.exit_code == 0
        assert "Deleted Credential cred-1" in caplog.text
        assert "GenericRecord" not in caplog.text

    def test_delete_missing(self, populated_db):
        """Deleting an unknown id reports it and succeeds."""
        result = runner.invoke(app, ["delete", "nope", "--db", str(populated_db)])

        assert result.exit_code == 0
        assert "No record with id nope" in result.output
