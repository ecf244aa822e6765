"""Process-wide logging setup for the API, the CLI and the migration tool."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Per-request access lines and pool housekeeping drown out the agent's own handled/rejected lines.
_QUIET_LOGGERS = ("uvicorn.access", "psycopg.pool")


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once per process.

    Error details are logged here with tracebacks; callers only ever see the JSON envelope, which
    carries `errorDetails` outside production.
    """

    log_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=log_level, format=LOG_FORMAT)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
