"""Centralized logging configuration using structlog.

Both entry points (``main`` for the web app, ``cli`` for management
commands) call ``configure_logging()`` once. Output goes to stderr so the
importer's stdout carries only the link listing.

- LOG_FORMAT=json emits one JSON object per line
- LOG_FORMAT=console (default) renders key=value pairs, colored on a TTY
- uvicorn and PIL stdlib records pass through the same renderer

Usage:
    from core import get_logger
    logger = get_logger(__name__)
    logger.info("import.complete", imported=3, skipped=1)
"""

import logging
import sys

import structlog
from structlog.types import Processor

from core.config import Settings, get_settings

# Library loggers that are chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "PIL")


def resolve_log_level(name: str) -> int:
    """Map a level name to its stdlib value; unknown names mean INFO."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def build_renderer(log_format: str, *, colors: bool) -> Processor:
    if log_format.strip().lower() == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=colors, exception_formatter=structlog.dev.plain_traceback
    )


def configure_logging(settings: Settings | None = None) -> None:
    """Route structlog and stdlib records through one stderr handler.

    Replaces any handlers already on the root logger.
    """
    settings = settings or get_settings()
    renderer = build_renderer(settings.log_format, colors=sys.stderr.isatty())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(resolve_log_level(settings.log_level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, typically ``get_logger(__name__)``."""
    return structlog.stdlib.get_logger(name)
