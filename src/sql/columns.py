"""Allowlisted SQL identifiers.

All table and column names referenced in generated SQL must come from these mappings; no
user-provided identifier is ever interpolated into SQL.
"""

from __future__ import annotations

TABLE_COLUMNS: dict[str, frozenset[str]] = {
    "hr_recruitment_jobs": frozenset(
        {
            "id",
            "title",
            "department",
            "hiring_manager",
            "status",
            "openings",
            "candidates",
            "avg_time_to_fill",
            "offer_acceptance",
            "diversity_ratio",
            "created_at",
        }
    ),
    "hr_recruitment_applications": frozenset(
        {
            "id",
            "job_id",
            "candidate_name",
            "stage",
            "score",
            "submitted_on",
            "email",
            "phone",
            "resume_url",
            "notes",
            "created_at",
        }
    ),
    "hr_leave_requests": frozenset(
        {
            "id",
            "employee_id",
            "employee_name",
            "leave_type",
            "start_date",
            "end_date",
            "status",
            "approver",
            "notes",
            "created_at",
        }
    ),
    "hr_expense_claims": frozenset(
        {
            "id",
            "employee_name",
            "category",
            "amount",
            "status",
            "submitted_on",
            "reimbursement_date",
            "notes",
            "receipt_url",
            "created_at",
        }
    ),
    "hr_projects": frozenset(
        {"id", "name", "lead", "status", "due_on", "contributors", "notes", "created_at"}
    ),
    "hr_audit_log": frozenset({"id", "actor", "action", "target", "metadata", "created_at"}),
}

ID_COLUMN = "id"

# Columns compared as numbers in exact-match filters; every other column is compared as text.
NUMERIC_COLUMNS: dict[str, frozenset[str]] = {
    "hr_recruitment_jobs": frozenset(
        {"openings", "candidates", "avg_time_to_fill", "offer_acceptance", "diversity_ratio"}
    ),
    "hr_recruitment_applications": frozenset({"score"}),
    "hr_expense_claims": frozenset({"amount"}),
}
