"""Key-value table store: partition/row keyed entities.

Two backends share one interface: SQLite for local runs and tests
(``sqlite:///path/to/file.db``), Azure Table Storage for any other
connection string.
"""
from __future__ import annotations

import json
import re
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.data.tables import TableClient, UpdateMode

from jobalert.log import get_logger

log = get_logger(__name__)

JOBS_TABLE = "jobalerts"
META_TABLE = "jobmetadata"

SQLITE_PREFIX = "sqlite:///"

_TABLE_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]{2,62}$")

Entity = dict[str, Any]


class StoreError(RuntimeError):
    """The store is unreachable or misconfigured; the run cannot continue."""


class EntityNotFound(KeyError):
    pass


class EntityExists(ValueError):
    pass


class TableStore(ABC):
    name: str

    @abstractmethod
    def create_table_if_absent(self) -> None:
        """Create the table; an existing table is not an error."""

    @abstractmethod
    def get_entity(self, partition_key: str, row_key: str) -> Entity:
        """Return the entity or raise EntityNotFound."""

    @abstractmethod
    def create_entity(self, entity: Entity) -> None:
        """Insert; raise EntityExists if the keys are taken."""

    @abstractmethod
    def upsert_entity(self, entity: Entity) -> None:
        """Insert or replace the whole entity."""

    @abstractmethod
    def close(self) -> None:
        """Release the connection; safe to call more than once."""


def _keys(entity: Entity) -> tuple[str, str]:
    try:
        return str(entity["PartitionKey"]), str(entity["RowKey"])
    except KeyError as exc:
        msg = f"entity is missing {exc.args[0]}"
        raise ValueError(msg) from None


# ---------------------------------------------------------------------------
# SQLite
# ---------------------------------------------------------------------------


class SqliteTableStore(TableStore):
    def __init__(self, conn: sqlite3.Connection, name: str) -> None:
        if not _TABLE_NAME_RE.match(name):
            msg = f"invalid table name: {name!r}"
            raise ValueError(msg)
        self._conn = conn
        self.name = name

    def create_table_if_absent(self) -> None:
        self._conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.name} (
                partition_key TEXT NOT NULL,
                row_key       TEXT NOT NULL,
                properties    TEXT NOT NULL,
                PRIMARY KEY (partition_key, row_key)
            )
            """
        )
        self._conn.commit()

    def get_entity(self, partition_key: str, row_key: str) -> Entity:
        row = self._conn.execute(
            f"SELECT properties FROM {self.name} WHERE partition_key = ? AND row_key = ?",
            (partition_key, row_key),
        ).fetchone()
        if row is None:
            raise EntityNotFound(f"{self.name}/{partition_key}/{row_key}")
        entity: Entity = json.loads(row[0])
        entity["PartitionKey"] = partition_key
        entity["RowKey"] = row_key
        return entity

    def create_entity(self, entity: Entity) -> None:
        pk, rk = _keys(entity)
        try:
            self._conn.execute(
                f"INSERT INTO {self.name} (partition_key, row_key, properties) VALUES (?, ?, ?)",
                (pk, rk, self._dump(entity)),
            )
            self._conn.commit()
        except sqlite3.IntegrityError:
            raise EntityExists(f"{self.name}/{pk}/{rk}") from None

    def upsert_entity(self, entity: Entity) -> None:
        pk, rk = _keys(entity)
        self._conn.execute(
            f"""
            INSERT INTO {self.name} (partition_key, row_key, properties) VALUES (?, ?, ?)
            ON CONFLICT(partition_key, row_key) DO UPDATE SET properties = excluded.properties
            """,
            (pk, rk, self._dump(entity)),
        )
        self._conn.commit()

    def close(self) -> None:
        # Both tables share one connection; sqlite3 ignores a second close.
        self._conn.close()

    @staticmethod
    def _dump(entity: Entity) -> str:
        body = {k: v for k, v in entity.items() if k not in ("PartitionKey", "RowKey")}
        return json.dumps(body, default=str)


def connect_sqlite(path: str | Path) -> sqlite3.Connection:
    if str(path) != ":memory:":
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


# ---------------------------------------------------------------------------
# Azure Table Storage
# ---------------------------------------------------------------------------


class AzureTableStore(TableStore):
    def __init__(self, client: TableClient) -> None:
        self._client = client
        self.name = client.table_name

    @classmethod
    def from_connection_string(cls, connection_string: str, name: str) -> AzureTableStore:
        return cls(TableClient.from_connection_string(connection_string, table_name=name))

    def create_table_if_absent(self) -> None:
        try:
            self._client.create_table()
            log.info("Created table %s", self.name)
        except ResourceExistsError:
            log.debug("Table %s already exists", self.name)

    def get_entity(self, partition_key: str, row_key: str) -> Entity:
        try:
            return dict(self._client.get_entity(partition_key=partition_key, row_key=row_key))
        except ResourceNotFoundError:
            raise EntityNotFound(f"{self.name}/{partition_key}/{row_key}") from None

    def create_entity(self, entity: Entity) -> None:
        _keys(entity)
        try:
            self._client.create_entity(entity=entity)
        except ResourceExistsError:
            pk, rk = _keys(entity)
            raise EntityExists(f"{self.name}/{pk}/{rk}") from None

    def upsert_entity(self, entity: Entity) -> None:
        _keys(entity)
        self._client.upsert_entity(entity=entity, mode=UpdateMode.REPLACE)

    def close(self) -> None:
        self._client.close()


def open_tables(connection_string: str) -> tuple[TableStore, TableStore]:
    """Return (processed_jobs, run_metadata) tables, created if absent.

    Any failure here is fatal: there is no fallback store.
    """
    if not connection_string:
        msg = "Storage connection string is not configured"
        raise StoreError(msg)

    try:
        if connection_string.startswith(SQLITE_PREFIX):
            conn = connect_sqlite(connection_string[len(SQLITE_PREFIX):])
            jobs: TableStore = SqliteTableStore(conn, JOBS_TABLE)
            meta: TableStore = SqliteTableStore(conn, META_TABLE)
        else:
            jobs = AzureTableStore.from_connection_string(connection_string, JOBS_TABLE)
            meta = AzureTableStore.from_connection_string(connection_string, META_TABLE)
        jobs.create_table_if_absent()
        meta.create_table_if_absent()
    except (AzureError, sqlite3.Error, ValueError, OSError) as exc:
        msg = f"Cannot open table store: {exc}"
        raise StoreError(msg) from exc

    log.info("Tables ready: %s, %s", jobs.name, meta.name)
    return jobs, meta
