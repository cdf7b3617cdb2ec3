"""
Stream event helpers shared by the pipeline stages.

Every log event handed to an observer is also written to the logger of the
emitting module.
"""

from __future__ import annotations

import logging
from typing import Any

from .models import LogEvent, LogLevel, PromptEvent, ResponseEvent, StreamCallback

__all__ = ["emit_log", "emit_prompt", "emit_response"]

_LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def emit_log(
    on_stream: StreamCallback | None,
    level: LogLevel,
    message: str,
    data: dict[str, Any] | None = None,
    *,
    logger: logging.Logger | None = None,
) -> None:
    """Log a message and forward it to the observer, if any."""
    data = data or {}
    target = logger or logging.getLogger(__name__)
    if data:
        target.log(_LOG_LEVELS[level], "%s %s", message, data)
    else:
        target.log(_LOG_LEVELS[level], "%s", message)
    if on_stream is not None:
        on_stream(LogEvent(level=level, message=message, data=data))


def emit_prompt(on_stream: StreamCallback | None, content: str) -> None:
    if on_stream is not None:
        on_stream(PromptEvent(content=content))


def emit_response(on_stream: StreamCallback | None, content: str) -> None:
    if on_stream is not None:
        on_stream(ResponseEvent(content=content))
