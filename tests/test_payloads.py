"""Tests for per-entity payload builders, the entity registry and required-field validation."""

from __future__ import annotations

import pytest

from src.agent.payloads import (
    ENTITIES,
    build_expense_claim_payload,
    build_leave_request_payload,
    build_project_payload,
    build_recruitment_application_payload,
    build_recruitment_job_payload,
    missing_required_fields,
)
from src.agent.schema import EntityKind
from src.sql.columns import TABLE_COLUMNS


def test_recruitment_job_aliases_and_numbers() -> None:
    payload = build_recruitment_job_payload(
        {
            "title": "  Backend Engineer ",
            "manager": "Dana",
            "openings": "3",
            "avgTimeToFill": "21.5",
            "offer_acceptance": "n/a",
            "unrelated": "ignored",
        }
    )
    assert payload == {
        "title": "Backend Engineer",
        "hiring_manager": "Dana",
        "openings": 3,
        "avg_time_to_fill": 21.5,
    }


def test_alias_precedence_follows_declaration() -> None:
    payload = build_recruitment_job_payload({"manager": "Lee", "hiringManager": "Kim"})
    assert payload == {"hiring_manager": "Kim"}


def test_recruitment_application_payload() -> None:
    payload = build_recruitment_application_payload(
        {"jobId": "job-42", "name": "Ana Ruiz", "score": 87, "date": "2024-03-01", "email": " "}
    )
    assert payload == {
        "job_id": "job-42",
        "candidate_name": "Ana Ruiz",
        "score": 87,
        "submitted_on": "2024-03-01",
    }


def test_leave_request_payload() -> None:
    payload = build_leave_request_payload(
        {"employee": "Sam", "type": "Vacation", "from": "2024-07-01", "to": "2024-07-05", "reason": "trip"}
    )
    assert payload == {
        "employee_name": "Sam",
        "leave_type": "Vacation",
        "start_date": "2024-07-01",
        "end_date": "2024-07-05",
        "notes": "trip",
    }


def test_expense_amount_defaults_to_zero_when_unparsable() -> None:
    assert build_expense_claim_payload({"amount": "twelve"}) == {"amount": 0}
    assert build_expense_claim_payload({"amount": "1200"}) == {"amount": 1200}
    assert build_expense_claim_payload({"category": "Travel"}) == {"category": "Travel"}


def test_project_contributors_split_and_trimmed() -> None:
    payload = build_project_payload({"project": "Apollo", "contributors": " Ann, Bob ,, Cy "})
    assert payload == {"name": "Apollo", "contributors": ["Ann", "Bob", "Cy"]}


def test_project_contributors_list_kept_and_other_types_dropped() -> None:
    assert build_project_payload({"contributors": ["Ann"]}) == {"contributors": ["Ann"]}
    assert build_project_payload({"contributors": 7}) == {}


def test_none_values_are_omitted() -> None:
    assert build_project_payload({"name": None, "lead": None, "status": ""}) == {}


def test_missing_required_fields_in_declared_order() -> None:
    required = ENTITIES[EntityKind.leave_request].required_for_create
    assert missing_required_fields({"leave_type": "Sick"}, required) == [
        "employee_name",
        "start_date",
        "end_date",
    ]
    assert missing_required_fields({"title": "X"}, ("title",)) == []


@pytest.mark.parametrize(
    ("kind", "required"),
    [
        (EntityKind.recruitment_job, ("title",)),
        (EntityKind.recruitment_application, ("job_id", "candidate_name")),
        (EntityKind.leave_request, ("employee_name", "leave_type", "start_date", "end_date")),
        (EntityKind.expense_claim, ("employee_name", "amount")),
        (EntityKind.project, ("name",)),
    ],
)
def test_required_fields_per_entity(kind: EntityKind, required: tuple[str, ...]) -> None:
    assert ENTITIES[kind].required_for_create == required


def test_registry_is_exhaustive_and_tables_allowlisted() -> None:
    assert set(ENTITIES) == set(EntityKind)
    for kind, descriptor in ENTITIES.items():
        assert descriptor.kind == kind
        assert descriptor.table in TABLE_COLUMNS


def test_builders_only_emit_allowlisted_columns() -> None:
    everything = {
        "title": "t", "department": "d", "hiring_manager": "h", "status": "s", "openings": 1,
        "candidates": 2, "avg_time_to_fill": 3, "offer_acceptance": 4, "diversity_ratio": 5,
        "job_id": "j", "candidate_name": "c", "stage": "st", "score": 6, "submitted_on": "2024-01-01",
        "email": "e", "phone": "p", "resume_url": "r", "notes": "n", "employee_id": "ei",
        "employee_name": "en", "leave_type": "lt", "start_date": "2024-01-02",
        "end_date": "2024-01-03", "approver": "a", "category": "cat", "amount": 7,
        "reimbursement_date": "2024-01-04", "receipt_url": "ru", "name": "nm", "lead": "ld",
        "due_on": "2024-01-05", "contributors": "x, y",
    }
    for descriptor in ENTITIES.values():
        payload = descriptor.build_payload(everything)
        assert payload
        assert set(payload) <= TABLE_COLUMNS[descriptor.table]
