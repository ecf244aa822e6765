"""API process entrypoint and FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.handlers import error_response
from src.api.router import router
from src.app import App, create_app
from src.config.logging import configure_logging
from src.config.settings import load_settings

logger = logging.getLogger(__name__)


def create_api(container: App) -> FastAPI:
    """Create the FastAPI application around an application container.

    The container's pool (if any) is opened on startup and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(_api: FastAPI) -> AsyncIterator[None]:
        if container.pool is not None:
            await container.pool.open(wait=True)
        try:
            yield
        finally:
            logger.info("shutting down")
            if container.pool is not None:
                await container.pool.close()

    api = FastAPI(
        title="HR Agent API",
        description="Natural-language CRUD commands over HR records",
        version="0.1.0",
        lifespan=lifespan,
    )
    api.state.container = container
    include_details = not container.settings.is_production

    @api.exception_handler(RequestValidationError)
    async def invalid_request(_request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("rejected status=400 reason=invalid request body")
        return error_response(
            "Invalid request. Send a JSON body with a `command` string.",
            status_code=400,
            error=ValueError(str(exc.errors())),
            include_details=include_details,
        )

    @api.exception_handler(Exception)
    async def unhandled(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request failed")
        return error_response(
            "Something went wrong!",
            status_code=500,
            error=exc,
            include_details=include_details,
        )

    @api.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "OK", "message": "Server is running"}

    api.include_router(router, prefix=container.settings.api_prefix)
    return api


def main() -> None:
    """Run the agent API with uvicorn."""

    settings = load_settings()
    configure_logging(settings.log_level)

    api = create_api(create_app(settings))
    uvicorn.run(api, host=settings.api_host, port=settings.api_port, log_config=None)


if __name__ == "__main__":
    main()
