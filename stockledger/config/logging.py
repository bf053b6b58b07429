"""
Structured logging setup.

structlog renders through stdlib logging so uvicorn, aiosqlite and our own
modules share one stream. Console output for development, one JSON object
per line everywhere else (or whatever ``LOG_FORMAT`` forces).
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from stockledger.config.settings import get_settings

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS: dict[str, int] = {
    "aiosqlite": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp every event with the service name, version and environment."""
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("version", settings.app_version)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def _renderer(log_format: str, environment: str) -> list[Processor]:
    if log_format == "auto":
        log_format = "console" if environment == "development" else "json"
    if log_format == "console":
        return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def configure_logging(level: str | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call more than once. ``level`` overrides ``LOG_LEVEL``.
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper())

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_service_context,
        *_renderer(settings.log_format, settings.environment),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level, force=True)
    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(quiet_level, log_level))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
