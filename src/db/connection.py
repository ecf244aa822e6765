"""Sync Postgres connections for migrations and test tooling."""

from __future__ import annotations

import psycopg
from psycopg.conninfo import make_conninfo


def with_search_path(database_url: str, schema: str) -> str:
    """Return a conninfo string whose sessions resolve unqualified tables in `schema`."""

    return make_conninfo(database_url, options=f"-c search_path={schema}")


def connect_utc(database_url: str) -> psycopg.Connection:
    """Open a sync connection with the session timezone locked to UTC."""

    conn = psycopg.connect(database_url)
    conn.execute("SET TIME ZONE 'UTC'", prepare=False)
    return conn
