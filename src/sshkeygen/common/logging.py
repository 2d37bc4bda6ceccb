"""Structured logging setup using structlog."""

from __future__ import annotations

import atexit
import logging
import sys
from typing import IO, Any

import structlog

_log_file: IO[str] | None = None


def _close_log_file() -> None:
    global _log_file

    if _log_file is not None:
        _log_file.close()
        _log_file = None


atexit.register(_close_log_file)


def _logger_factory(*args: Any) -> structlog.PrintLogger:
    # Resolve stderr per logger so writes follow redirections such as rich Live.
    return structlog.PrintLogger(file=_log_file or sys.stderr)


def setup_logging(
    level: str = "WARNING",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """
    Configure structlog for the process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Render JSON lines instead of the console renderer
        log_file: Append to this file instead of writing to stderr
    """
    global _log_file

    _close_log_file()
    if log_file:
        _log_file = open(log_file, "a", encoding="utf-8")
    stream = _log_file or sys.stderr

    renderer: Any
    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=_logger_factory,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger bound to the given module name."""
    return structlog.get_logger(name)
