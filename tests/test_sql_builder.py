"""Tests for deterministic SQL builder (allowlists + parameter binding)."""

from __future__ import annotations

import pytest

from src.agent.schema import RecordFilter
from src.sql.builder import (
    SQLBuilderError,
    build_delete_by_id,
    build_insert,
    build_select,
    build_update_by_id,
)


def _placeholder_count(sql: str) -> int:
    return sql.count("%s")


def test_build_select_without_filters() -> None:
    query = build_select("hr_projects", [], limit=100)
    assert query.sql == "SELECT * FROM hr_projects LIMIT %s"
    assert query.params == (100,)


def test_build_select_mixes_partial_and_exact_filters() -> None:
    query = build_select(
        "hr_expense_claims",
        [
            RecordFilter(column="employee_name", value="Ana", match="ilike"),
            RecordFilter(column="amount", value=50, match="eq"),
        ],
        limit=10,
    )

    assert query.sql == (
        "SELECT * FROM hr_expense_claims "
        "WHERE employee_name::text ILIKE %s AND amount = %s LIMIT %s"
    )
    assert query.params == ("%Ana%", 50, 10)
    assert "Ana" not in query.sql
    assert _placeholder_count(query.sql) == len(query.params)


def test_build_select_escapes_like_wildcards() -> None:
    query = build_select(
        "hr_projects",
        [RecordFilter(column="name", value="100%_done", match="ilike")],
        limit=5,
    )
    assert query.params[0] == "%100\\%\\_done%"


def test_build_select_rejects_non_positive_limit() -> None:
    with pytest.raises(SQLBuilderError):
        build_select("hr_projects", [], limit=0)


def test_build_insert_returns_row() -> None:
    query = build_insert("hr_recruitment_jobs", {"title": "Backend Engineer", "openings": 2})
    assert query.sql == (
        "INSERT INTO hr_recruitment_jobs (title, openings) VALUES (%s, %s) RETURNING *"
    )
    assert query.params == ("Backend Engineer", 2)


def test_build_update_by_id_binds_id_last() -> None:
    query = build_update_by_id("hr_leave_requests", "abc123", {"status": "Approved"})
    assert query.sql == (
        "UPDATE hr_leave_requests SET status = %s WHERE id::text = %s RETURNING *"
    )
    assert query.params == ("Approved", "abc123")


def test_build_delete_by_id() -> None:
    query = build_delete_by_id("hr_projects", "abc123")
    assert query.sql == "DELETE FROM hr_projects WHERE id::text = %s RETURNING *"
    assert query.params == ("abc123",)


def test_unknown_table_is_rejected() -> None:
    with pytest.raises(SQLBuilderError, match="Unknown table"):
        build_select("users; DROP TABLE hr_projects", [], limit=1)
    with pytest.raises(SQLBuilderError, match="Unknown table"):
        build_delete_by_id("pg_user", "abc123")


def test_unknown_column_is_rejected() -> None:
    with pytest.raises(SQLBuilderError, match="Unknown column"):
        build_insert("hr_projects", {"name": "Apollo", "salary": 1})
    with pytest.raises(SQLBuilderError, match="Unknown column"):
        build_select(
            "hr_projects",
            [RecordFilter(column="name = name OR 1", value=1)],
            limit=1,
        )


def test_empty_mutations_are_rejected() -> None:
    with pytest.raises(SQLBuilderError):
        build_insert("hr_projects", {})
    with pytest.raises(SQLBuilderError):
        build_update_by_id("hr_projects", "abc123", {})


def test_exact_match_on_text_column_compares_as_text() -> None:
    query = build_select(
        "hr_leave_requests",
        [
            RecordFilter(column="employee_id", value=1001, match="eq"),
            RecordFilter(column="notes", value=False, match="eq"),
        ],
        limit=10,
    )
    assert query.sql == (
        "SELECT * FROM hr_leave_requests "
        "WHERE employee_id::text = %s AND notes::text = %s LIMIT %s"
    )
    assert query.params == ("1001", "false", 10)


def test_non_numeric_value_on_numeric_column_compares_as_text() -> None:
    query = build_select(
        "hr_recruitment_applications",
        [RecordFilter(column="score", value=True, match="eq")],
        limit=1,
    )
    assert query.sql == (
        "SELECT * FROM hr_recruitment_applications WHERE score::text = %s LIMIT %s"
    )
    assert query.params == ("true", 1)
