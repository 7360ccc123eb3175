"""Structured logging for the estimator, API and CLI, built on *structlog*."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


def _render_processors(stream: TextIO, json_output: bool | None) -> list[structlog.types.Processor]:
    if json_output is None:
        json_output = not stream.isatty()
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    # ConsoleRenderer formats exceptions itself
    return [structlog.dev.ConsoleRenderer()]


def setup_logging(level: str = "INFO", *, stream: TextIO | None = None, json_output: bool | None = None) -> None:
    """Configure structlog once at startup.

    Logs go to *stream* (stderr by default) so that ``estimate --json``
    keeps stdout machine-readable.  Output is JSON unless the stream is a
    terminal; pass *json_output* to force either format.
    """
    stream = stream or sys.stderr
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            *_render_processors(stream, json_output),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )
