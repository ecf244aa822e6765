"""English keyword dictionaries for action and entity classification.

Both tables are ordered and evaluated first-match-wins on plain substrings. Keyword sets overlap
(e.g. "job" vs "recruitment application job_id"), so declaration order is the tie-break and must not
be replaced with scoring.
"""

from __future__ import annotations

from src.agent.normalize import normalize_text
from src.agent.schema import Action, EntityKind

ACTION_KEYWORDS: dict[Action, tuple[str, ...]] = {
    Action.create: ("create", "add", "log", "open", "new", "start"),
    Action.read: ("list", "show", "get", "fetch", "view", "find"),
    Action.update: ("update", "edit", "set", "change", "modify"),
    Action.delete: ("delete", "remove", "archive", "drop"),
}

ENTITY_KEYWORDS: tuple[tuple[EntityKind, tuple[str, ...]], ...] = (
    (
        EntityKind.recruitment_job,
        ("recruitment job", "job", "requisition", "role", "opening"),
    ),
    (EntityKind.recruitment_application, ("application", "candidate", "applicant")),
    (EntityKind.leave_request, ("leave request", "leave", "time off", "pto")),
    (EntityKind.expense_claim, ("expense", "claim", "reimbursement")),
    (EntityKind.project, ("project", "initiative", "engagement")),
)


def detect_action(text: str) -> Action | None:
    """Return the first action whose keywords occur in the text."""

    lowered = normalize_text(text)
    for action, keywords in ACTION_KEYWORDS.items():
        if any(word in lowered for word in keywords):
            return action
    return None


def detect_entity(text: str) -> EntityKind | None:
    """Return the first entity kind whose keywords occur in the text."""

    lowered = normalize_text(text)
    for kind, keywords in ENTITY_KEYWORDS:
        if any(word in lowered for word in keywords):
            return kind
    return None
