"""Structured logging configuration for Preflighter.

Log events are emitted through structlog on top of the standard library so
that the checklist rendering on stdout stays clean:
- Pretty console output on stderr (default)
- JSON output when PREFLIGHTER_LOG_FORMAT=json
- Run-level context (run_id, checklist) bound through contextvars

Usage:
    from preflighter.logging import configure_logging, get_logger

    configure_logging()
    log = get_logger(__name__)
    log.info("item_check_finished", title="Backups verified", passed=True)
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

LOG_FORMAT_ENV_VAR = "PREFLIGHTER_LOG_FORMAT"

LOG_LEVEL_ENV_VAR = "PREFLIGHTER_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"


def _get_log_level() -> int:
    """Read the log level from the environment, falling back to WARNING."""
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.WARNING)


def _is_json_output() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _get_shared_processors() -> list[Processor]:
    """Processors applied to both structlog and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _get_renderer(use_json: bool) -> Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Configure structlog and the root stdlib logger.

    Call once at startup; calling again reconfigures logging, which the test
    suite relies on.

    Args:
        force_json: Force JSON output regardless of PREFLIGHTER_LOG_FORMAT.
        level: Override log level. If None, reads PREFLIGHTER_LOG_LEVEL.
    """
    use_json = force_json or _is_json_output()
    log_level = level if level is not None else _get_log_level()

    structlog.configure(
        processors=[
            *_get_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                _get_renderer(use_json),
            ],
            foreign_pre_chain=_get_shared_processors(),
        )
    )
    root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name. If None, uses the caller's module name.

    Returns:
        A bound structlog logger.

    Example:
        log = get_logger(__name__)
        log = log.bind(checklist="upgrade.yaml")
        log.info("env_resolved", variables=3)
    """
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log


def bind_context(**context: Any) -> None:
    """Bind context variables included in every subsequent log event.

    Example:
        bind_context(run_id="a1b2c3")
        log.info("run_started")  # includes run_id
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Clear all bound context variables at the end of a run."""
    structlog.contextvars.clear_contextvars()
