"""Best-effort audit trail for agent dispatch attempts."""

from __future__ import annotations

import logging

from src.agent.schema import AuditEntry
from src.db.store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_AUDIT_TABLE = "hr_audit_log"


class AuditRecorder:
    """Append audit entries to the audit table without ever failing the caller."""

    def __init__(self, store: RecordStore, table: str = DEFAULT_AUDIT_TABLE) -> None:
        self._store = store
        self._table = table

    @property
    def table(self) -> str:
        return self._table

    async def record(self, entry: AuditEntry) -> None:
        row = {
            "actor": entry.actor,
            "action": entry.action,
            "target": entry.target,
            "metadata": {
                "payload": entry.payload,
                "result": entry.result,
                "success": entry.success,
            },
        }

        # noinspection PyBroadException
        try:
            await self._store.insert(self._table, row)
        except Exception:  # noqa: BLE001 - audit failures must not replace the primary response
            logger.warning(
                "failed to record agent audit entry action=%s target=%s",
                entry.action,
                entry.target,
                exc_info=True,
            )
