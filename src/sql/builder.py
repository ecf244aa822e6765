"""Deterministic SQL builder for record-store operations.

Tables and columns are strictly allowlisted (`src.sql.columns`); only values become bound
parameters. Every mutating statement returns the affected row.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from src.agent.schema import RecordFilter
from src.sql.columns import ID_COLUMN, NUMERIC_COLUMNS, TABLE_COLUMNS


class SQLBuilderError(ValueError):
    """Raised when a statement would reference a non-allowlisted identifier."""


@dataclass(frozen=True)
class BuiltQuery:
    """A parameterized SQL query ready for execution."""

    sql: str
    params: tuple[Any, ...]


def _columns_for(table: str) -> frozenset[str]:
    try:
        return TABLE_COLUMNS[table]
    except KeyError as exc:
        raise SQLBuilderError(f"Unknown table: {table}") from exc


def _checked_columns(table: str, columns: Iterable[str]) -> list[str]:
    allowed = _columns_for(table)
    checked = list(columns)
    unknown = [c for c in checked if c not in allowed]
    if unknown:
        raise SQLBuilderError(f"Unknown column(s) for {table}: {', '.join(sorted(unknown))}")
    return checked


def _where_and(clauses: list[str]) -> str:
    if not clauses:
        return ""
    return "WHERE " + " AND ".join(clauses)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def as_sql_text(value: Any) -> str:
    """Render a filter value the way Postgres prints it as text (`true`/`false` for booleans)."""

    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def is_numeric_match(table: str, column: str, value: Any) -> bool:
    """Whether an exact-match filter compares numbers rather than text."""

    return (
            isinstance(value, (int, float))
            and not isinstance(value, bool)
            and column in NUMERIC_COLUMNS.get(table, frozenset())
    )


def build_select(table: str, filters: Iterable[RecordFilter], *, limit: int) -> BuiltQuery:
    """`SELECT *` with AND-combined filters.

    Partial matches, and exact matches outside the numeric columns, compare the column as text so
    a number or yes/no value never meets a TEXT column with a mismatched operator.
    """

    if limit <= 0:
        raise SQLBuilderError("limit must be a positive integer")

    filters = list(filters)
    _checked_columns(table, (f.column for f in filters))

    clauses: list[str] = []
    params: list[Any] = []
    for f in filters:
        if f.match == "ilike":
            clauses.append(f"{f.column}::text ILIKE %s")
            params.append(f"%{_escape_like(str(f.value))}%")
        elif is_numeric_match(table, f.column, f.value):
            clauses.append(f"{f.column} = %s")
            params.append(f.value)
        else:
            clauses.append(f"{f.column}::text = %s")
            params.append(as_sql_text(f.value))

    params.append(limit)
    sql = f"SELECT * FROM {table} {_where_and(clauses)} LIMIT %s"
    return BuiltQuery(sql=" ".join(sql.split()), params=tuple(params))


def build_insert(table: str, payload: Mapping[str, Any]) -> BuiltQuery:
    if not payload:
        raise SQLBuilderError("insert requires at least one column")

    columns = _checked_columns(table, payload.keys())
    placeholders = ", ".join(["%s"] * len(columns))
    sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders}) RETURNING *"
    return BuiltQuery(sql=sql, params=tuple(payload[c] for c in columns))


def build_update_by_id(table: str, record_id: str, payload: Mapping[str, Any]) -> BuiltQuery:
    if not payload:
        raise SQLBuilderError("update requires at least one column")

    columns = _checked_columns(table, payload.keys())
    assignments = ", ".join(f"{c} = %s" for c in columns)
    # id is compared as text so a malformed id matches no row.
    sql = f"UPDATE {table} SET {assignments} WHERE {ID_COLUMN}::text = %s RETURNING *"
    return BuiltQuery(sql=sql, params=(*(payload[c] for c in columns), record_id))


def build_delete_by_id(table: str, record_id: str) -> BuiltQuery:
    _columns_for(table)
    sql = f"DELETE FROM {table} WHERE {ID_COLUMN}::text = %s RETURNING *"
    return BuiltQuery(sql=sql, params=(record_id,))
