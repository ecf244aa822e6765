"""Async Postgres connection pool shared by the API, the CLI and the record store.

New connections are pinned to UTC when the pool creates them, so `created_at` values and dates
echoed back in envelopes never depend on the server's default timezone.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

SESSION_TIMEZONE = "UTC"


async def _configure_session(conn: AsyncConnection) -> None:
    await conn.execute(f"SET TIME ZONE '{SESSION_TIMEZONE}'", prepare=False)
    # `SET` opens a transaction when autocommit is off; the pool rejects connections left INTRANS.
    await conn.commit()


def create_pool(
        database_url: str,
        *,
        max_size: int | None = None,
        min_size: int = 1,
        timeout: float = 30.0,
) -> AsyncConnectionPool:
    """Create the record-store pool.

    The pool is returned closed (`open=False`); the API lifespan or the CLI opens it with
    `await pool.open(wait=True)` and closes it on exit.
    """

    return AsyncConnectionPool(
        conninfo=database_url,
        min_size=min_size,
        max_size=max_size,
        timeout=timeout,
        open=False,
        configure=_configure_session,
    )


@asynccontextmanager
async def get_conn(pool: AsyncConnectionPool) -> AsyncIterator[AsyncConnection]:
    """Borrow one pooled connection for the duration of a record-store call."""

    async with pool.connection() as conn:
        yield conn
