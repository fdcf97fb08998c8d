"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from jobalert.tables import META_TABLE, JOBS_TABLE, SqliteTableStore, connect_sqlite
from jobalert.tracker import JobTracker


@pytest.fixture()
def tables() -> Iterator[tuple[SqliteTableStore, SqliteTableStore]]:
    conn = connect_sqlite(":memory:")
    jobs = SqliteTableStore(conn, JOBS_TABLE)
    meta = SqliteTableStore(conn, META_TABLE)
    jobs.create_table_if_absent()
    meta.create_table_if_absent()
    yield jobs, meta
    conn.close()


@pytest.fixture()
def tracker(tables: tuple[SqliteTableStore, SqliteTableStore]) -> JobTracker:
    return JobTracker(*tables)
