"""
Logging configuration for the API.

Builds the "api" logger on greenlight.utils.setup_logger and tags every
record with the id of the request being served.
"""

import logging
import os
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import Optional

from greenlight.utils import setup_logger

# Context variable for request ID tracking across async calls
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    """Add request_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


def setup_api_logger(
    name: str = "api",
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Set up the API logger; console output includes INFO request lines."""
    return setup_logger(
        name,
        log_dir=log_dir,
        level=level,
        console_level=logging.INFO,
        fmt="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s",
        filters=[RequestIdFilter()],
    )


def generate_request_id() -> str:
    """Generate a short unique request ID."""
    return uuid.uuid4().hex[:8]


def set_request_id(request_id: str) -> None:
    """Set the request ID in context."""
    request_id_var.set(request_id)


# Initialize the main API logger
logger = setup_api_logger(log_dir=Path(os.getenv("PROJECT_DIR", Path.cwd())) / "logs")
