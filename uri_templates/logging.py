"""Structured logging for uri_templates.

Library modules call ``get_logger(__name__)``; applications (the CLI) call
``configure_logging()`` once. Controlled by:

- ``URI_TEMPLATES_LOG_LEVEL`` (default ``WARNING``)
- ``URI_TEMPLATES_LOG_FORMAT=json`` for JSON lines, console rendering otherwise
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

__all__ = ["configure_logging", "get_logger"]

LOG_LEVEL_ENV_VAR = "URI_TEMPLATES_LOG_LEVEL"
LOG_FORMAT_ENV_VAR = "URI_TEMPLATES_LOG_FORMAT"
DEFAULT_LOG_LEVEL = "WARNING"


def _get_log_level() -> int:
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.WARNING)


def _is_json_output() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def configure_logging(level: int | None = None) -> None:
    """Configure structlog to write to stderr."""
    log_level = level if level is not None else _get_log_level()

    renderer: structlog.types.Processor
    if _is_json_output():
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger, configuring defaults on first use.

    Unconfigured structlog prints every level to stdout, which would leak debug
    events into expanded output.
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)
