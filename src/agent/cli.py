"""Run a single agent command from the terminal.

Example:
    python -m src.agent.cli 'update project id: 550e8400-e29b-41d4-a716-446655440000, status: Done'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from src.agent.errors import AgentCommandError
from src.agent.schema import AgentCommand
from src.app import create_app
from src.config.logging import configure_logging
from src.config.settings import Settings, load_settings


def _parse_data(raw: str | None) -> dict[str, Any] | None:
    if raw is None:
        return None

    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("--data must be a JSON object")
    return data


async def run(command: AgentCommand, settings: Settings) -> tuple[int, dict[str, Any]]:
    """Execute the command against the configured database.

    Returns:
        The process exit code and the response envelope.
    """

    app = create_app(settings)
    assert app.pool is not None

    await app.pool.open(wait=True)
    try:
        result = await app.execute(command)
    except AgentCommandError as exc:
        return 1, {"success": False, "error": exc.message, "status": exc.status_code}
    finally:
        await app.pool.close()

    return 0, result.to_envelope()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for executing one agent command."""

    parser = argparse.ArgumentParser(description="Execute one HR agent command.")
    parser.add_argument("command", help="Natural-language command, e.g. 'list projects'.")
    parser.add_argument("--data", help="Explicit fields as a JSON object (wins over the text).")
    parser.add_argument("--actor", help="Actor recorded in the audit log.")
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Confirm destructive actions (required for delete).",
    )
    args = parser.parse_args(argv)

    try:
        data = _parse_data(args.data)
    except ValueError as exc:
        parser.error(f"invalid --data: {exc}")

    settings = load_settings()
    configure_logging(settings.log_level)

    command = AgentCommand(command=args.command, data=data, actor=args.actor, confirm=args.confirm)
    exit_code, envelope = asyncio.run(run(command, settings))

    print(json.dumps(envelope, indent=2, default=str))
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
