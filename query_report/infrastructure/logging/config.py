"""Structured logging configuration.

Events from the registry and the search backend carry search keys as
structured fields; they are rendered for humans outside production and as
one JSON object per line in production.
"""

import logging
import sys
from typing import Any

import structlog

from query_report.infrastructure.config import Settings


def shared_processors() -> list[Any]:
    """Processors applied to every event before rendering."""
    return [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def renderer_processors(settings: Settings) -> list[Any]:
    """Pick the final rendering step for the environment."""
    if settings.is_production:
        return [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def configure_logging(settings: Settings) -> None:
    """Route structlog events through the standard library at ``LOG_LEVEL``."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level, logging.INFO),
    )
    logging.getLogger("query_report").setLevel(settings.log_level)

    structlog.configure(
        processors=shared_processors() + renderer_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
