"""Structured logging configuration for projget.

This module provides structlog-based logging with:
- JSON output when env var PROJGET_LOG_FORMAT=json
- Pretty console output for interactive use (default)
- Context binding for the provisioning run (project_id, target)

Usage:
    from projget.logging import get_logger, configure_logging

    # Configure logging once at application startup
    configure_logging()

    log = get_logger(__name__)
    log = log.bind(project_id="demo")
    log.info("remote_probed", state="populated")
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

__all__ = [
    "get_logger",
    "configure_logging",
    "bind_context",
    "clear_context",
]

# Environment variable for log format
LOG_FORMAT_ENV_VAR = "PROJGET_LOG_FORMAT"

# Environment variable for log level
LOG_LEVEL_ENV_VAR = "PROJGET_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"


def _get_log_level() -> int:
    """Get the log level from environment or default."""
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.WARNING)


def _is_json_output() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _get_shared_processors() -> list[Processor]:
    """Get processors shared between stdlib and structlog."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _get_console_processors() -> list[Processor]:
    return [
        *_get_shared_processors(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        ),
    ]


def _get_json_processors() -> list[Processor]:
    return [
        *_get_shared_processors(),
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Configure structlog for the application.

    Call once at startup; subsequent calls reconfigure logging. Log output
    always goes to stderr so it never mixes with command output.

    Args:
        force_json: Force JSON output regardless of environment variable.
        level: Override log level. If None, reads PROJGET_LOG_LEVEL.
    """
    use_json = force_json or _is_json_output()
    log_level = level if level is not None else _get_log_level()

    processors = _get_json_processors() if use_json else _get_console_processors()

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=_get_shared_processors(),
        )
    )

    root_logger.addHandler(handler)

    # GitPython logs every command at DEBUG; keep it one notch quieter.
    logging.getLogger("git").setLevel(max(log_level, logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name. If None, uses the caller's module name.

    Returns:
        A bound structlog logger.

    Example:
        log = get_logger(__name__)
        log.info("clone_started", branch="master")
    """
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log


def bind_context(**context: Any) -> None:
    """Bind context variables included in all subsequent log messages.

    Example:
        bind_context(project_id="demo")
        log.info("event")  # Includes project_id
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
