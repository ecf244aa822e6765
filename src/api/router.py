"""Agent router composition."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.agent.schema import AgentCommand
from src.api.handlers import handle_command
from src.app import App

router = APIRouter()


def get_app(request: Request) -> App:
    return request.app.state.container


@router.post("/execute")
async def execute_agent_command(command: AgentCommand, request: Request) -> JSONResponse:
    """Interpret a natural-language command and run it against the HR tables."""

    return await handle_command(command, get_app(request))
