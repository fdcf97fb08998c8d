"""Tests for the table store backends."""

import sqlite3
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.data.tables import UpdateMode

from jobalert.tables import (
    AzureTableStore,
    EntityExists,
    EntityNotFound,
    SqliteTableStore,
    StoreError,
    connect_sqlite,
    open_tables,
)


def _entity(**props: object) -> dict[str, object]:
    return {"PartitionKey": "jobs", "RowKey": "abc", **props}


# ---------------------------------------------------------------------------
# SQLite
# ---------------------------------------------------------------------------


class TestSqliteTableStore:
    def test_create_table_is_idempotent(self, tables) -> None:
        jobs, _ = tables
        jobs.create_table_if_absent()
        jobs.create_table_if_absent()

    def test_missing_entity(self, tables) -> None:
        jobs, _ = tables
        with pytest.raises(EntityNotFound):
            jobs.get_entity("jobs", "nope")

    def test_create_then_get(self, tables) -> None:
        jobs, _ = tables
        jobs.create_entity(_entity(title="Cloud Engineer", count=3))
        entity = jobs.get_entity("jobs", "abc")
        assert entity == {"PartitionKey": "jobs", "RowKey": "abc", "title": "Cloud Engineer", "count": 3}

    def test_create_twice_raises(self, tables) -> None:
        jobs, _ = tables
        jobs.create_entity(_entity())
        with pytest.raises(EntityExists):
            jobs.create_entity(_entity())

    def test_upsert_replaces(self, tables) -> None:
        _, meta = tables
        meta.upsert_entity(_entity(a=1, b=2))
        meta.upsert_entity(_entity(a=5))
        assert meta.get_entity("jobs", "abc") == {"PartitionKey": "jobs", "RowKey": "abc", "a": 5}

    def test_tables_are_separate(self, tables) -> None:
        jobs, meta = tables
        jobs.create_entity(_entity())
        with pytest.raises(EntityNotFound):
            meta.get_entity("jobs", "abc")

    def test_keys_required(self, tables) -> None:
        jobs, _ = tables
        with pytest.raises(ValueError, match="RowKey"):
            jobs.create_entity({"PartitionKey": "jobs"})

    def test_bad_table_name(self) -> None:
        with pytest.raises(ValueError, match="invalid table name"):
            SqliteTableStore(connect_sqlite(":memory:"), "jobs; DROP TABLE x")


# ---------------------------------------------------------------------------
# Azure
# ---------------------------------------------------------------------------


@pytest.fixture()
def client() -> MagicMock:
    mock = MagicMock()
    mock.table_name = "jobalerts"
    return mock


class TestAzureTableStore:
    def test_existing_table_ignored(self, client: MagicMock) -> None:
        client.create_table.side_effect = ResourceExistsError("exists")
        AzureTableStore(client).create_table_if_absent()
        client.create_table.assert_called_once()

    def test_not_found_mapped(self, client: MagicMock) -> None:
        client.get_entity.side_effect = ResourceNotFoundError("missing")
        with pytest.raises(EntityNotFound):
            AzureTableStore(client).get_entity("jobs", "abc")

    def test_get_returns_dict(self, client: MagicMock) -> None:
        client.get_entity.return_value = _entity(title="x")
        assert AzureTableStore(client).get_entity("jobs", "abc")["title"] == "x"
        client.get_entity.assert_called_once_with(partition_key="jobs", row_key="abc")

    def test_exists_mapped(self, client: MagicMock) -> None:
        client.create_entity.side_effect = ResourceExistsError("exists")
        with pytest.raises(EntityExists):
            AzureTableStore(client).create_entity(_entity())

    def test_upsert_replaces(self, client: MagicMock) -> None:
        AzureTableStore(client).upsert_entity(_entity(a=1))
        client.upsert_entity.assert_called_once_with(entity=_entity(a=1), mode=UpdateMode.REPLACE)


# ---------------------------------------------------------------------------
# open_tables
# ---------------------------------------------------------------------------


class TestOpenTables:
    def test_empty_connection_string(self) -> None:
        with pytest.raises(StoreError):
            open_tables("")

    def test_sqlite(self, tmp_path) -> None:
        jobs, meta = open_tables(f"sqlite:///{tmp_path / 'state' / 'alerts.db'}")
        assert (jobs.name, meta.name) == ("jobalerts", "jobmetadata")
        jobs.create_entity(_entity())
        assert jobs.get_entity("jobs", "abc")["RowKey"] == "abc"

    def test_sqlite_state_survives_reopen(self, tmp_path) -> None:
        cs = f"sqlite:///{tmp_path / 'alerts.db'}"
        open_tables(cs)[1].upsert_entity(_entity(lastRunAt="2025-03-01T00:00:00+00:00"))
        assert open_tables(cs)[1].get_entity("jobs", "abc")["lastRunAt"].startswith("2025-03-01")

    def test_malformed_azure_string(self) -> None:
        with pytest.raises(StoreError, match="Cannot open table store"):
            open_tables("this is not a connection string")


class TestClose:
    def test_sqlite_close_is_idempotent(self) -> None:
        conn = connect_sqlite(":memory:")
        jobs = SqliteTableStore(conn, "jobalerts")
        meta = SqliteTableStore(conn, "jobmetadata")
        jobs.close()
        meta.close()
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")

    def test_azure_close(self, client: MagicMock) -> None:
        AzureTableStore(client).close()
        client.close.assert_called_once()
