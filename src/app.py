"""Application composition root.

This module wires together configuration, the DB pool, the record store and the audit recorder for
the API and CLI runtimes.
"""

from __future__ import annotations

from dataclasses import dataclass

from psycopg_pool import AsyncConnectionPool

from src.agent.audit import AuditRecorder
from src.agent.dispatcher import execute_command
from src.agent.schema import AgentCommand, AgentResult
from src.config.settings import Settings
from src.db.pool import create_pool
from src.db.store import PostgresRecordStore, RecordStore


@dataclass(frozen=True)
class App:
    """Shared application dependencies for request handlers."""

    settings: Settings
    store: RecordStore
    auditor: AuditRecorder
    pool: AsyncConnectionPool | None = None

    async def execute(self, command: AgentCommand) -> AgentResult:
        """Run one agent command with the configured actor default and read limit."""

        return await execute_command(
            command,
            store=self.store,
            auditor=self.auditor,
            default_actor=self.settings.agent_default_actor,
            read_limit=self.settings.agent_read_limit,
        )


def create_app(settings: Settings) -> App:
    """Create the application container.

    Note:
        The returned DB pool is not opened. Call `await app.pool.open()` at startup.
    """

    pool = create_pool(settings.database_url, max_size=settings.db_pool_max_size)
    store = PostgresRecordStore(pool)
    auditor = AuditRecorder(store, table=settings.agent_audit_table)
    return App(settings=settings, store=store, auditor=auditor, pool=pool)
