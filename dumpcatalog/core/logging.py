"""Structured logging for dumpcatalog.

Usage:
    from dumpcatalog.core.logging import configure_logging, get_logger

    configure_logging(log_level="DEBUG")
    logger = get_logger(__name__)
    logger.debug("file_routed", path="db1.t1.1.sql", schema="db1", table="t1")

    with LogContext(source="/data/dump"):
        logger.info("scan_started")
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from contextvars import ContextVar
from typing import Any, cast

import structlog
from structlog.typing import FilteringBoundLogger

_load_context: ContextVar[dict[str, Any] | None] = ContextVar("load_context", default=None)


def _add_load_context(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Processor to add the current load context to log events."""
    context = _load_context.get()
    if context:
        for key, value in context.items():
            event_dict.setdefault(key, value)
    return event_dict


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # resolved per call so a replaced sys.stderr is picked up
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    show_timestamps: bool = False,
    color: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: "console" for humans, "json" for log collectors
        show_timestamps: Whether to prefix events with an ISO timestamp
        color: Whether to colorize console output
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_load_context,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if show_timestamps:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso", utc=True))

    if log_format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(
                colors=color,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level.upper())),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Get a structured logger (typically ``get_logger(__name__)``)."""
    return cast(FilteringBoundLogger, structlog.get_logger(name))


class LogContext:
    """Context manager adding key/value pairs to every event in its scope."""

    def __init__(self, **context: Any):
        self.context = context
        self.token: Any = None

    def __enter__(self) -> LogContext:
        current = _load_context.get() or {}
        self.token = _load_context.set({**current, **self.context})
        return self

    def __exit__(self, *args: Any) -> None:
        if self.token is not None:
            _load_context.reset(self.token)
