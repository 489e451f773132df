"""
Centralized logging configuration using structlog
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import structlog

# Context variables for job tracking
message_id_ctx: ContextVar[int | None] = ContextVar("message_id", default=None)
job_handle_ctx: ContextVar[str | None] = ContextVar("job_handle", default=None)


class JobContextFilter:
    """Add job context to log records."""

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        """Add job context to the event dict."""
        # Suppress unused parameter warnings - these are required by structlog interface
        _ = logger, method_name

        message_id = message_id_ctx.get()
        job_handle = job_handle_ctx.get()

        if message_id is not None:
            event_dict["message_id"] = message_id

        if job_handle:
            event_dict["job_handle"] = job_handle

        return event_dict


def configure_logging(debug: bool = False, log_level: str | None = None) -> None:
    """Configure structlog with appropriate processors and formatters.

    Args:
        debug: If True, use human-readable console output. If False, use JSON.
        log_level: Explicit level name; defaults to DEBUG when debug is set, INFO otherwise.
    """

    if log_level:
        level = logging.getLevelName(log_level.upper())
    else:
        level = logging.DEBUG if debug else logging.INFO

    # Configure stdlib logging
    logging.basicConfig(
        level=level,
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        JobContextFilter(),
        structlog.processors.TimeStamper(fmt="ISO", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        # Development: human-readable console output
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        # Production: JSON output
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def set_job_context(message_id: int | None = None, job_handle: str | None = None) -> None:
    """Set job context variables.

    Args:
        message_id: Correlation id of the timeline message the job reports to
        job_handle: Remote operation name of the job
    """
    if message_id is not None:
        message_id_ctx.set(message_id)
    if job_handle is not None:
        job_handle_ctx.set(job_handle)


@contextmanager
def job_context(message_id: int | None = None) -> Iterator[None]:
    """Bind a message id for the duration of a block, restoring the previous values after."""
    message_token = message_id_ctx.set(message_id)
    handle_token = job_handle_ctx.set(None)
    try:
        yield
    finally:
        job_handle_ctx.reset(handle_token)
        message_id_ctx.reset(message_token)
