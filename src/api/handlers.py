"""Agent endpoint handler.

Hard contract: every request produces exactly one JSON envelope, `{"success": true, ...}` on success
or `{"success": false, "error": ...}` with the status of the failure class. Outside production the
failure envelope also carries `errorDetails` for the underlying error.
"""

from __future__ import annotations

import logging
from time import monotonic
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from src.agent.errors import AgentCommandError, AgentExecutionError
from src.agent.schema import AgentCommand
from src.app import App

logger = logging.getLogger(__name__)


def error_details(error: BaseException | None) -> dict[str, Any] | None:
    """Debug fields of an error (and its store cause, if any)."""

    if error is None:
        return None

    source = error.__cause__ or error
    return {
        "message": getattr(source, "message", None) or str(source),
        "code": getattr(source, "code", None),
        "hint": getattr(source, "hint", None),
        "details": getattr(source, "details", None),
    }


def error_response(
        message: str,
        *,
        status_code: int,
        error: BaseException | None = None,
        include_details: bool = False,
) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "error": message}
    if include_details and error is not None:
        content["errorDetails"] = error_details(error)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


async def handle_command(command: AgentCommand, app: App) -> JSONResponse:
    """Execute one agent command and render its envelope."""

    started = monotonic()
    include_details = not app.settings.is_production

    try:
        result = await app.execute(command)
    except AgentExecutionError as exc:
        latency_ms = int((monotonic() - started) * 1000)
        logger.error("failed status=%d reason=%s latency_ms=%d", exc.status_code, exc, latency_ms)
        return error_response(
            exc.message,
            status_code=exc.status_code,
            error=exc,
            include_details=include_details,
        )
    except AgentCommandError as exc:
        latency_ms = int((monotonic() - started) * 1000)
        logger.info("rejected status=%d reason=%s latency_ms=%d", exc.status_code, exc, latency_ms)
        return error_response(
            exc.message,
            status_code=exc.status_code,
            error=exc,
            include_details=include_details,
        )

    latency_ms = int((monotonic() - started) * 1000)
    logger.info(
        "handled action=%s entity=%s latency_ms=%d",
        result.action,
        result.entity,
        latency_ms,
    )
    return JSONResponse(status_code=200, content=jsonable_encoder(result.to_envelope()))
