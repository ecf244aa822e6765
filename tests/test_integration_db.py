"""Integration tests against a real Postgres database.

These tests exercise the end-to-end pipeline:
rules parser -> dispatcher -> deterministic SQL builder -> psycopg async pool -> audit log.

They are skipped if `DATABASE_URL` is not configured or the DB is unreachable.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import AsyncIterator, Iterator
from typing import NoReturn

import psycopg
import pytest
from dotenv import load_dotenv
from psycopg import sql

from src.agent.audit import AuditRecorder
from src.agent.errors import RecordNotFoundError
from src.agent.schema import AgentCommand
from src.app import App
from src.config.settings import Settings
from src.db.connection import connect_utc, with_search_path
from src.db.migrate import migrate
from src.db.pool import create_pool, get_conn
from src.db.store import PostgresRecordStore


def _skip(reason: str) -> NoReturn:
    pytest.skip(reason)


def _require_database_url() -> str:
    load_dotenv(".env")
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        _skip("DATABASE_URL is not set; skipping integration tests")
    return database_url


@pytest.fixture(scope="module")
def schema_url() -> Iterator[str]:
    """Create an isolated schema, run migrations in it, and return a conninfo bound to it."""

    database_url = _require_database_url()
    schema = f"it_{uuid.uuid4().hex}"

    try:
        conn_ctx = connect_utc(database_url)
    except psycopg.OperationalError as exc:
        _skip(f"Postgres is unreachable ({exc}); skipping integration tests")

    with conn_ctx as conn:
        with conn.transaction():
            conn.execute(
                sql.SQL("CREATE SCHEMA {}").format(sql.Identifier(schema)),
                prepare=False,
            )

    url = with_search_path(database_url, schema)
    migrate(recreate=False, database_url=url)

    yield url

    # noinspection PyBroadException
    try:
        with psycopg.connect(database_url) as conn:
            with conn.transaction():
                conn.execute(
                    sql.SQL("DROP SCHEMA IF EXISTS {} CASCADE").format(sql.Identifier(schema)),
                    prepare=False,
                )
    except Exception:
        # Cleanup best-effort: do not fail test run on teardown.
        pass


@pytest.fixture
async def app(schema_url: str) -> AsyncIterator[App]:
    """An application container on a small pool bound to the test schema."""

    db_pool = create_pool(schema_url, max_size=2)
    try:
        await db_pool.open(wait=True)
    except Exception as exc:
        _skip(f"Postgres is unreachable ({exc}); skipping integration tests")

    settings = Settings(DATABASE_URL=schema_url, APP_ENV="test")
    store = PostgresRecordStore(db_pool)
    yield App(
        settings=settings,
        store=store,
        auditor=AuditRecorder(store, table=settings.agent_audit_table),
        pool=db_pool,
    )
    await db_pool.close()


async def _audit_count(app: App, target: str) -> int:
    assert app.pool is not None
    async with get_conn(app.pool) as conn:
        async with conn.cursor() as cur:
            await cur.execute("SELECT COUNT(*) FROM hr_audit_log WHERE target = %s", (target,))
            row = await cur.fetchone()
        await conn.commit()
    assert row is not None
    return int(row[0])


@pytest.mark.asyncio
async def test_pool_enforces_utc_timezone(app: App) -> None:
    assert app.pool is not None
    async with get_conn(app.pool) as conn:
        async with conn.cursor() as cur:
            await cur.execute("SHOW TimeZone", prepare=False)
            row = await cur.fetchone()
        assert row is not None
        assert row[0] == "UTC"


@pytest.mark.asyncio
async def test_project_lifecycle_end_to_end(app: App) -> None:
    created = await app.execute(
        AgentCommand(
            command="create project name: Atlas, lead: Dana",
            data={"contributors": "Ana, Bo", "dueOn": "2025-03-01"},
        )
    )
    record = created.data["record"]
    record_id = str(record["id"])
    assert record["name"] == "Atlas"
    assert record["contributors"] == ["Ana", "Bo"]

    found = await app.execute(AgentCommand(command="show projects", data={"name": "atl"}))
    assert [str(r["id"]) for r in found.data["records"]] == [record_id]

    updated = await app.execute(
        AgentCommand(command="modify project status: Done", data={"id": record_id})
    )
    assert updated.data["record"]["status"] == "Done"

    deleted = await app.execute(
        AgentCommand(command="delete project", data={"id": record_id}, confirm=True)
    )
    assert deleted.data == {"recordId": record_id}

    assert await _audit_count(app, "project") == 3


@pytest.mark.asyncio
async def test_malformed_id_is_not_found(app: App) -> None:
    with pytest.raises(RecordNotFoundError):
        await app.execute(
            AgentCommand(command="remove leave id: nope-123456", confirm=True)
        )


@pytest.mark.asyncio
async def test_expense_claim_numeric_filter(app: App) -> None:
    await app.execute(
        AgentCommand(command="log expense claim employee: Ana Ruiz, amount: 120.5")
    )
    await app.execute(AgentCommand(command="log expense claim employee: Bo Chen, amount: 80"))

    found = await app.execute(AgentCommand(command="list expense claims amount: 80"))

    assert [r["employee_name"] for r in found.data["records"]] == ["Bo Chen"]


@pytest.mark.asyncio
async def test_exact_filters_on_text_columns(app: App) -> None:
    await app.execute(
        AgentCommand(
            command=(
                "log leave request employee_id: 1001, employee: Ann, type: PTO, "
                "start_date: 2024-01-15, end_date: 2024-01-16, notes: no"
            )
        )
    )

    by_employee = await app.execute(AgentCommand(command="list leave requests employee_id: 1001"))
    assert [r["employee_name"] for r in by_employee.data["records"]] == ["Ann"]

    by_flag = await app.execute(AgentCommand(command="list leave requests notes: no"))
    assert [r["notes"] for r in by_flag.data["records"]] == ["false"]
