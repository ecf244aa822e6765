"""Schema migrations for the HR tables and the agent audit log.

Migrations are plain `.sql` files in `src/db/migrations/`, applied once each in filename order and
recorded in `schema_migrations`. Usage:

    python -m src.db.migrate             # apply pending migrations
    python -m src.db.migrate --status    # list applied/pending without changing anything
    python -m src.db.migrate --recreate  # drop the HR tables first (destructive)
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import LiteralString, cast

import psycopg
from psycopg import sql

from src.config.logging import configure_logging
from src.config.settings import load_settings
from src.db.connection import connect_utc
from src.sql.columns import TABLE_COLUMNS

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"
LEDGER_TABLE = "schema_migrations"


@dataclass(frozen=True)
class MigrationPlan:
    applied: list[str]
    pending: list[Path]


def list_migration_files(directory: Path = MIGRATIONS_DIR) -> list[Path]:
    """All `.sql` files in `directory`, sorted by name."""

    files = sorted(directory.glob("*.sql")) if directory.is_dir() else []
    if not files:
        raise RuntimeError(f"No .sql migration files found in {directory}")
    return files


def _plan(conn: psycopg.Connection, files: list[Path]) -> MigrationPlan:
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {LEDGER_TABLE}
        (
            filename   TEXT PRIMARY KEY,
            applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        """,
        prepare=False,
    )
    done = {
        row[0]
        for row in conn.execute(f"SELECT filename FROM {LEDGER_TABLE}", prepare=False).fetchall()
    }
    return MigrationPlan(
        applied=[f.name for f in files if f.name in done],
        pending=[f for f in files if f.name not in done],
    )


def _drop_hr_tables(conn: psycopg.Connection) -> None:
    with conn.transaction():
        for table in [*TABLE_COLUMNS, LEDGER_TABLE]:
            conn.execute(
                sql.SQL("DROP TABLE IF EXISTS {}").format(sql.Identifier(table)),
                prepare=False,
            )


def migrate(
        *,
        recreate: bool = False,
        database_url: str | None = None,
        dry_run: bool = False,
) -> list[str]:
    """Apply pending migrations.

    Returns:
        The filenames applied by this call (or, with `dry_run`, the ones that would be).
    """

    if database_url is None:
        database_url = load_settings().database_url

    files = list_migration_files()

    with connect_utc(database_url) as conn:
        if recreate and not dry_run:
            logger.warning("dropping HR agent tables before migrating")
            _drop_hr_tables(conn)

        plan = _plan(conn, files)
        conn.commit()
        if dry_run:
            return [f.name for f in plan.pending]

        for path in plan.pending:
            with conn.transaction():
                conn.execute(cast(LiteralString, path.read_text(encoding="utf-8")), prepare=False)
                conn.execute(
                    f"INSERT INTO {LEDGER_TABLE} (filename) VALUES (%s)",
                    (path.name,),
                    prepare=False,
                )
            logger.info("applied migration %s", path.name)

    return [f.name for f in plan.pending]


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for applying migrations."""

    parser = argparse.ArgumentParser(description="Apply HR agent SQL migrations to Postgres.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--recreate",
        action="store_true",
        help="Drop the HR tables and re-apply all migrations (destructive).",
    )
    mode.add_argument(
        "--status",
        action="store_true",
        help="Only report which migrations are pending.",
    )
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings.log_level)
    names = migrate(
        recreate=args.recreate,
        database_url=settings.database_url,
        dry_run=args.status,
    )
    if args.status:
        for name in names:
            print(f"pending {name}")
        if not names:
            print("up to date")
    elif not names:
        logger.info("no pending migrations")


if __name__ == "__main__":
    main()
