"""Per-entity payload builders and the entity registry.

Builders take the merged command data (text facts overlaid with explicit data) and return only the
canonical columns of one table. Unset values are omitted rather than written as NULL, so partial
updates never clobber columns the caller did not mention.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from src.agent.normalize import parse_number, trim_or_none
from src.agent.schema import EntityDescriptor, EntityKind, Payload


def _first(source: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first alias that is present and not None."""

    for key in keys:
        value = source.get(key)
        if value is not None:
            return value
    return None


def _text(source: Mapping[str, Any], *keys: str) -> Any:
    return trim_or_none(_first(source, *keys))


def _number(
        source: Mapping[str, Any],
        *keys: str,
        fallback: float | int | None = None,
) -> float | int | None:
    value = _first(source, *keys)
    if value is None:
        return None
    return parse_number(value, fallback)


def _compact(mapped: Mapping[str, Any]) -> Payload:
    return {key: value for key, value in mapped.items() if value is not None}


def _contributors(value: Any) -> list[Any] | None:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


def build_recruitment_job_payload(data: Mapping[str, Any]) -> Payload:
    return _compact(
        {
            "title": _text(data, "title"),
            "department": _text(data, "department"),
            "hiring_manager": _text(data, "hiring_manager", "hiringManager", "manager"),
            "status": _text(data, "status"),
            "openings": _number(data, "openings"),
            "candidates": _number(data, "candidates"),
            "avg_time_to_fill": _number(data, "avgTimeToFill", "avg_time_to_fill"),
            "offer_acceptance": _number(data, "offerAcceptance", "offer_acceptance"),
            "diversity_ratio": _number(data, "diversityRatio", "diversity_ratio"),
        }
    )


def build_recruitment_application_payload(data: Mapping[str, Any]) -> Payload:
    return _compact(
        {
            "job_id": _text(data, "job_id", "jobId", "job"),
            "candidate_name": _text(data, "candidate_name", "candidateName", "name"),
            "stage": _text(data, "stage"),
            "score": _number(data, "score"),
            "submitted_on": _text(data, "submitted_on", "submittedOn", "date"),
            "email": _text(data, "email"),
            "phone": _text(data, "phone"),
            "resume_url": _text(data, "resume_url", "resumeUrl"),
            "notes": _text(data, "notes"),
        }
    )


def build_leave_request_payload(data: Mapping[str, Any]) -> Payload:
    return _compact(
        {
            "employee_id": _text(data, "employee_id", "employeeId"),
            "employee_name": _text(data, "employee_name", "employeeName", "employee"),
            "leave_type": _text(data, "leave_type", "leaveType", "type"),
            "start_date": _text(data, "start_date", "startDate", "from"),
            "end_date": _text(data, "end_date", "endDate", "to"),
            "status": _text(data, "status"),
            "approver": _text(data, "approver"),
            "notes": _text(data, "notes", "reason"),
        }
    )


def build_expense_claim_payload(data: Mapping[str, Any]) -> Payload:
    return _compact(
        {
            "employee_name": _text(data, "employee_name", "employeeName", "employee"),
            "category": _text(data, "category"),
            # An amount that was given but cannot be parsed is recorded as 0.
            "amount": _number(data, "amount", fallback=0),
            "status": _text(data, "status"),
            "submitted_on": _text(data, "submitted_on", "submittedOn", "date"),
            "reimbursement_date": _text(data, "reimbursement_date", "reimbursementDate"),
            "notes": _text(data, "notes"),
            "receipt_url": _text(data, "receipt_url", "receiptUrl"),
        }
    )


def build_project_payload(data: Mapping[str, Any]) -> Payload:
    return _compact(
        {
            "name": _text(data, "name", "project"),
            "lead": _text(data, "lead", "owner", "manager"),
            "status": _text(data, "status"),
            "due_on": _text(data, "due_on", "dueOn", "deadline"),
            "contributors": _contributors(data.get("contributors")),
            "notes": _text(data, "notes", "summary"),
        }
    )


ENTITIES: dict[EntityKind, EntityDescriptor] = {
    EntityKind.recruitment_job: EntityDescriptor(
        kind=EntityKind.recruitment_job,
        label="recruitment job",
        table="hr_recruitment_jobs",
        build_payload=build_recruitment_job_payload,
        required_for_create=("title",),
    ),
    EntityKind.recruitment_application: EntityDescriptor(
        kind=EntityKind.recruitment_application,
        label="recruitment application",
        table="hr_recruitment_applications",
        build_payload=build_recruitment_application_payload,
        required_for_create=("job_id", "candidate_name"),
    ),
    EntityKind.leave_request: EntityDescriptor(
        kind=EntityKind.leave_request,
        label="leave request",
        table="hr_leave_requests",
        build_payload=build_leave_request_payload,
        required_for_create=("employee_name", "leave_type", "start_date", "end_date"),
    ),
    EntityKind.expense_claim: EntityDescriptor(
        kind=EntityKind.expense_claim,
        label="expense claim",
        table="hr_expense_claims",
        build_payload=build_expense_claim_payload,
        required_for_create=("employee_name", "amount"),
    ),
    EntityKind.project: EntityDescriptor(
        kind=EntityKind.project,
        label="project",
        table="hr_projects",
        build_payload=build_project_payload,
        required_for_create=("name",),
    ),
}


def get_entity(kind: EntityKind) -> EntityDescriptor:
    return ENTITIES[kind]


def missing_required_fields(payload: Mapping[str, Any], required: Iterable[str]) -> list[str]:
    """Return the required fields that are absent or None, in declared order."""

    return [name for name in required if payload.get(name) is None]
