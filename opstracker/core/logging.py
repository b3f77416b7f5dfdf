"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from opstracker.core.config import Settings, get_settings


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structlog and route stdlib loggers to the same stream.

    Output is JSON unless ``log_format`` asks for console rendering, or is
    ``auto`` with debug enabled. Every event carries the service name.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if _use_console(settings):
        renderer: list[Processor] = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    else:
        renderer = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=[*shared_processors, *renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=settings.app_name)

    # uvicorn and redis log through the stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)


def _use_console(settings: Settings) -> bool:
    if settings.log_format == "auto":
        return settings.debug
    return settings.log_format == "console"


def get_logger(name: str | None = None, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """Get a logger, optionally bound to initial context values."""
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger
