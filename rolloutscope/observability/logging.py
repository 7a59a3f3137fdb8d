"""Structured logging configuration using structlog.

The server logs JSON lines; the CLI switches to the human-readable console
renderer so diagnostics interleave cleanly with its own output.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO, cast

import structlog
from structlog.typing import FilteringBoundLogger, Processor

_LEVELS: frozenset[str] = frozenset({"debug", "info", "warning", "error"})


def setup_logging(level: str = "info", *, json_output: bool = True, stream: TextIO | None = None) -> None:
    """Configure structlog for the process.

    Args:
        level:       One of debug/info/warning/error. Unknown values fall back to info.
        json_output: Render JSON lines when True, console key=value pairs otherwise.
        stream:      Destination stream, stderr by default.
    """
    normalized = level.lower() if level.lower() in _LEVELS else "info"
    log_level = getattr(logging, normalized.upper())

    renderer: Processor = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> FilteringBoundLogger:
    """Get a logger bound with a component name."""
    return cast(FilteringBoundLogger, structlog.get_logger(component=component))
