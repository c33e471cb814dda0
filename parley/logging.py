"""Structured logging configuration for Parley.

Provides a single `configure()` function that sets up structlog with:
- JSON output by default (PARLEY_LOG_FORMAT=json)
- Colored console output for development (PARLEY_LOG_FORMAT=console)
- Configurable log level via PARLEY_LOG_LEVEL environment variable
- Context variable merging for session identifiers
- Standard library integration so third-party libraries emit structured output
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import structlog

# Stores the service name set by configure() so reset_context() can restore it.
_configured_service_name: str | None = None


def _add_service_name(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict,
) -> dict:
    """Structlog processor that adds the service name to every log entry."""
    if "_service_name" in event_dict:
        event_dict["service"] = event_dict.pop("_service_name")
    return event_dict


_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    _add_service_name,
]


def _resolve_level(name: str) -> int:
    """Map a level name to its numeric value; unknown names mean INFO."""
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else logging.INFO


def _select_renderer(log_format: str) -> structlog.types.Processor:
    if log_format.lower() == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def _install_stdlib_handler(
    stream: TextIO,
    processors: list[structlog.types.Processor],
    log_level: int,
) -> None:
    """Replace root handlers with one that renders stdlib records like structlog."""
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *processors],
    )
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def configure(
    service_name: str,
    level: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for a Parley process.

    Args:
        service_name: Identifier for this process (e.g. "parley-cli").
        level: Log level overriding PARLEY_LOG_LEVEL.
        stream: Destination for log lines (default: stdout). The CLI logs to
            stderr so transcripts on stdout stay clean.

    Environment Variables:
        PARLEY_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to INFO.
        PARLEY_LOG_FORMAT: Output format. "json" (default) for JSON lines,
            "console" for colored human-readable output.
    """
    log_level = _resolve_level(level or os.environ.get("PARLEY_LOG_LEVEL", "INFO"))
    renderer = _select_renderer(os.environ.get("PARLEY_LOG_FORMAT", "json"))
    tail = [structlog.processors.format_exc_info, renderer]

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.processors.StackInfoRenderer(),
            *tail,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )
    _install_stdlib_handler(
        stream or sys.stdout, [*_SHARED_PROCESSORS, *tail], log_level
    )

    global _configured_service_name
    _configured_service_name = service_name
    structlog.contextvars.bind_contextvars(_service_name=service_name)


def reset_context(**extra: object) -> None:
    """Clear structlog contextvars and re-apply the service name.

    Call this when a new realtime session starts so session-scoped context
    (session_id, replay_session) does not leak between sessions.

    Args:
        **extra: Additional context variables to bind (e.g. session_id).
    """
    structlog.contextvars.clear_contextvars()
    if _configured_service_name:
        structlog.contextvars.bind_contextvars(_service_name=_configured_service_name)
    if extra:
        structlog.contextvars.bind_contextvars(**extra)
