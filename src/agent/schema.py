"""Agent command schema.

These models are the contract between the HTTP/CLI surface, the rules-based command parser and the
dispatcher. Wire input is validated by Pydantic; internal values are frozen dataclasses.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

FactValue = str | int | float | bool
Payload = dict[str, Any]


class Action(StrEnum):
    """Supported agent actions, in classification order."""

    create = "create"
    read = "read"
    update = "update"
    delete = "delete"


class EntityKind(StrEnum):
    """Record types the agent can manage."""

    recruitment_job = "recruitmentJob"
    recruitment_application = "recruitmentApplication"
    leave_request = "leaveRequest"
    expense_claim = "expenseClaim"
    project = "project"


class AgentCommand(BaseModel):
    """One agent request as received from a caller.

    `command` is optional at the schema level so that a missing command is reported through the
    agent error envelope (400) rather than a generic validation failure.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    command: str | None = None
    data: dict[str, Any] | None = None
    actor: str | None = None
    confirm: bool | None = False


@dataclass(frozen=True)
class EntityDescriptor:
    """Everything the dispatcher needs to know about one record type."""

    kind: EntityKind
    label: str
    table: str
    build_payload: Callable[[Mapping[str, Any]], Payload]
    required_for_create: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedCommand:
    """A classified command with the text-derived and explicit data kept apart."""

    text: str
    action: Action
    entity: EntityDescriptor
    facts: dict[str, FactValue] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    record_id: str | None = None

    @property
    def merged(self) -> dict[str, Any]:
        """Extracted facts overlaid with explicit data (explicit wins)."""

        return {**self.facts, **self.data}


@dataclass(frozen=True)
class RecordFilter:
    """A single read filter; `ilike` is a case-insensitive partial match."""

    column: str
    value: Any
    match: Literal["ilike", "eq"] = "eq"


@dataclass(frozen=True)
class AuditEntry:
    """One dispatch attempt as written to the audit log."""

    actor: str
    action: str
    target: str
    payload: Any
    result: Any
    success: bool


@dataclass(frozen=True)
class AgentResult:
    """Successful outcome of one agent command."""

    action: Action
    entity: str
    summary: str
    data: dict[str, Any]

    def to_envelope(self) -> dict[str, Any]:
        return {
            "success": True,
            "action": str(self.action),
            "entity": self.entity,
            "summary": self.summary,
            "data": self.data,
        }
