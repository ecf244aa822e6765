"""Agent command dispatcher.

Runs one parsed command through its action branch:

    create: payload -> required fields -> insert
    update: record id -> non-empty payload -> update by id
    delete: record id -> confirmation -> delete by id
    read:   payload as filters -> select

Every create/update/delete that reaches the record store writes exactly one audit entry. A store
exception is audited as a failure and surfaced as `AgentExecutionError`.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from src.agent.audit import AuditRecorder
from src.agent.errors import (
    AgentCommandError,
    AgentExecutionError,
    ConfirmationRequiredError,
    EmptyUpdateError,
    MissingFieldsError,
    MissingRecordIdError,
    RecordNotFoundError,
    UnsupportedActionError,
)
from src.agent.parser import parse_command
from src.agent.payloads import missing_required_fields
from src.agent.schema import (
    Action,
    AgentCommand,
    AgentResult,
    AuditEntry,
    ParsedCommand,
    RecordFilter,
)
from src.db.store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_ACTOR = "agent"
DEFAULT_READ_LIMIT = 100

# Strings up to this length are matched exactly (e.g. status codes, initials).
_PARTIAL_MATCH_MIN_LENGTH = 3


@dataclass(frozen=True)
class _Dispatch:
    parsed: ParsedCommand
    actor: str
    confirm: bool
    store: RecordStore
    auditor: AuditRecorder
    read_limit: int

    @property
    def label(self) -> str:
        return self.parsed.entity.label

    @property
    def table(self) -> str:
        return self.parsed.entity.table

    async def audit(self, *, payload: Any, result: Any, success: bool) -> None:
        await self.auditor.record(
            AuditEntry(
                actor=self.actor,
                action=str(self.parsed.action),
                target=self.label,
                payload=payload,
                result=result,
                success=success,
            )
        )


def build_read_filters(payload: Mapping[str, Any]) -> list[RecordFilter]:
    """Turn a canonical payload into read filters.

    Strings longer than two characters are case-insensitive partial matches; every other value is
    an exact match. Empty strings are ignored.
    """

    filters: list[RecordFilter] = []
    for column, value in payload.items():
        if value is None or value == "":
            continue
        if isinstance(value, str) and len(value) >= _PARTIAL_MATCH_MIN_LENGTH:
            filters.append(RecordFilter(column=column, value=value, match="ilike"))
        else:
            filters.append(RecordFilter(column=column, value=value, match="eq"))
    return filters


async def _create(ctx: _Dispatch) -> AgentResult:
    payload = ctx.parsed.entity.build_payload(ctx.parsed.merged)
    missing = missing_required_fields(payload, ctx.parsed.entity.required_for_create)
    if missing:
        raise MissingFieldsError(missing)

    record = await ctx.store.insert(ctx.table, payload)

    await ctx.audit(payload=payload, result=record, success=True)
    return AgentResult(
        action=Action.create,
        entity=ctx.label,
        summary=f"Created {ctx.label}.",
        data={"record": record},
    )


async def _update(ctx: _Dispatch) -> AgentResult:
    record_id = ctx.parsed.record_id
    if not record_id:
        raise MissingRecordIdError("update")

    payload = ctx.parsed.entity.build_payload(ctx.parsed.merged)
    if not payload:
        raise EmptyUpdateError()

    record = await ctx.store.update_by_id(ctx.table, record_id, payload)

    audited_payload = {"id": record_id, **payload}
    if record is None:
        await ctx.audit(
            payload=audited_payload,
            result={"error": "record not found"},
            success=False,
        )
        raise RecordNotFoundError(ctx.label, record_id)

    await ctx.audit(payload=audited_payload, result=record, success=True)
    return AgentResult(
        action=Action.update,
        entity=ctx.label,
        summary=f"Updated {ctx.label} {record_id}.",
        data={"record": record},
    )


async def _delete(ctx: _Dispatch) -> AgentResult:
    record_id = ctx.parsed.record_id
    if not record_id:
        raise MissingRecordIdError("delete")

    if not ctx.confirm:
        raise ConfirmationRequiredError()

    record = await ctx.store.delete_by_id(ctx.table, record_id)

    if record is None:
        await ctx.audit(
            payload={"id": record_id},
            result={"error": "record not found"},
            success=False,
        )
        raise RecordNotFoundError(ctx.label, record_id)

    await ctx.audit(payload={"id": record_id}, result=record, success=True)
    return AgentResult(
        action=Action.delete,
        entity=ctx.label,
        summary=f"Deleted {ctx.label} {record_id}.",
        data={"recordId": record_id},
    )


async def _read(ctx: _Dispatch) -> AgentResult:
    filters = build_read_filters(ctx.parsed.entity.build_payload(ctx.parsed.merged))
    records = await ctx.store.select(ctx.table, filters, limit=ctx.read_limit)

    count = len(records)
    noun = ctx.label if count == 1 else f"{ctx.label}s"
    return AgentResult(
        action=Action.read,
        entity=ctx.label,
        summary=f"Found {count} {noun}.",
        data={"records": records},
    )


_HANDLERS: dict[Action, Callable[[_Dispatch], Awaitable[AgentResult]]] = {
    Action.create: _create,
    Action.read: _read,
    Action.update: _update,
    Action.delete: _delete,
}


async def execute_command(
        command: AgentCommand,
        *,
        store: RecordStore,
        auditor: AuditRecorder,
        default_actor: str = DEFAULT_ACTOR,
        read_limit: int = DEFAULT_READ_LIMIT,
) -> AgentResult:
    """Parse and execute one agent command.

    Raises:
        AgentCommandError: For every rejected command; `AgentExecutionError` (500) when the record
            store fails, after the failure has been audited.
    """

    parsed = parse_command(command.command, command.data)

    try:
        handler = _HANDLERS[parsed.action]
    except KeyError as exc:
        raise UnsupportedActionError(str(parsed.action)) from exc

    ctx = _Dispatch(
        parsed=parsed,
        actor=command.actor or default_actor,
        confirm=bool(command.confirm),
        store=store,
        auditor=auditor,
        read_limit=read_limit,
    )

    try:
        return await handler(ctx)
    except AgentCommandError:
        raise
    except Exception as exc:  # noqa: BLE001 - any store failure becomes an audited 500
        logger.exception(
            "store call failed action=%s entity=%s",
            parsed.action,
            parsed.entity.kind,
        )
        await ctx.audit(payload=parsed.merged, result={"error": str(exc)}, success=False)
        raise AgentExecutionError(str(parsed.action), ctx.label) from exc
