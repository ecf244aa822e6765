"""Record store used by the agent dispatcher.

`RecordStore` is the generic record-access interface (select/insert/update/delete by id).
`PostgresRecordStore` implements it on the async pool with allowlisted, parameterized SQL.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from functools import partial
from typing import Any, LiteralString, Protocol, cast

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb
from psycopg_pool import AsyncConnectionPool

from src.agent.schema import RecordFilter
from src.db.pool import get_conn
from src.sql.builder import (
    BuiltQuery,
    build_delete_by_id,
    build_insert,
    build_select,
    build_update_by_id,
)

Row = dict[str, Any]

_json_dumps = partial(json.dumps, default=str)


class StoreError(RuntimeError):
    """A record-store failure with the Postgres SQLSTATE (if any) preserved."""

    def __init__(
            self,
            message: str,
            *,
            code: str | None = None,
            hint: str | None = None,
            details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint
        self.details = details

    @classmethod
    def from_psycopg(cls, exc: psycopg.Error) -> StoreError:
        diag = getattr(exc, "diag", None)
        return cls(
            str(exc).strip() or exc.__class__.__name__,
            code=getattr(exc, "sqlstate", None),
            hint=getattr(diag, "message_hint", None),
            details=getattr(diag, "message_detail", None),
        )


class RecordStore(Protocol):
    """Generic record access consumed by the dispatcher and the audit recorder."""

    async def select(
            self,
            table: str,
            filters: Sequence[RecordFilter],
            *,
            limit: int,
    ) -> list[Row]:
        ...

    async def insert(self, table: str, payload: Mapping[str, Any]) -> Row:
        ...

    async def update_by_id(
            self,
            table: str,
            record_id: str,
            payload: Mapping[str, Any],
    ) -> Row | None:
        ...

    async def delete_by_id(self, table: str, record_id: str) -> Row | None:
        ...


def _adapt(value: Any) -> Any:
    """Send mappings as JSONB; lists stay native so they bind as Postgres arrays."""

    if isinstance(value, Mapping):
        return Jsonb(dict(value), dumps=_json_dumps)
    return value


def _adapt_params(params: tuple[Any, ...]) -> tuple[Any, ...]:
    return tuple(_adapt(p) for p in params)


class PostgresRecordStore:
    """`RecordStore` backed by a psycopg async connection pool.

    Each call runs in its own transaction on a pooled connection.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def _fetch(self, query: BuiltQuery) -> list[Row]:
        try:
            async with get_conn(self._pool) as conn:
                async with conn.transaction():
                    async with conn.cursor(row_factory=dict_row) as cur:
                        await cur.execute(
                            cast(LiteralString, query.sql),
                            _adapt_params(query.params),
                        )
                        return await cur.fetchall()
        except psycopg.Error as exc:
            raise StoreError.from_psycopg(exc) from exc

    async def select(
            self,
            table: str,
            filters: Sequence[RecordFilter],
            *,
            limit: int,
    ) -> list[Row]:
        return await self._fetch(build_select(table, filters, limit=limit))

    async def insert(self, table: str, payload: Mapping[str, Any]) -> Row:
        rows = await self._fetch(build_insert(table, payload))
        if not rows:
            raise StoreError(f"insert into {table} returned no row")
        return rows[0]

    async def update_by_id(
            self,
            table: str,
            record_id: str,
            payload: Mapping[str, Any],
    ) -> Row | None:
        rows = await self._fetch(build_update_by_id(table, record_id, payload))
        return rows[0] if rows else None

    async def delete_by_id(self, table: str, record_id: str) -> Row | None:
        rows = await self._fetch(build_delete_by_id(table, record_id))
        return rows[0] if rows else None
