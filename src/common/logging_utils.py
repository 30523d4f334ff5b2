"""Centralized logging helpers.

Provides root logger configuration driven by the FEATUREGATE_LOG_LEVEL
environment variable, structured ``extra`` payloads for DEBUG events and a
small timer used to report durations.
"""
from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional

from constants import Constants

_CONTEXT_FIELDS = ("event", "component", "action", "outcome", "target", "count", "duration_ms")


class _ContextFormatter(logging.Formatter):
    """Formatter appending structured context fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        parts = []
        for name in _CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                parts.append(f"{name}={value}")
        extra = getattr(record, "context", None)
        if isinstance(extra, dict):
            parts.extend(f"{k}={v}" for k, v in sorted(extra.items()))
        if parts and record.levelno <= logging.DEBUG:
            return f"{base} ({', '.join(parts)})"
        return base


def configure_logging(log_file: Optional[str] = None) -> None:
    """Configure the root logger once.

    The level comes from FEATUREGATE_LOG_LEVEL (default INFO). Repeated calls
    replace the handlers installed by a previous call.
    """
    level_name = os.environ.get(Constants.ENV_LOG_LEVEL, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_featuregate", False):
            root.removeHandler(handler)

    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_ContextFormatter(Constants.LOG_FORMAT))
    handler._featuregate = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    Known fields become record attributes; anything else is grouped under
    ``context``. None values are dropped.
    """
    extra: Dict[str, Any] = {}
    context: Dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if key in _CONTEXT_FIELDS:
            extra[key] = value
        else:
            context[key] = value
    if context:
        extra["context"] = context
    return extra


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by logger."""
    return logger.isEnabledFor(logging.DEBUG)


class Timer:
    """Context manager measuring wall-clock duration."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Return elapsed milliseconds; running timers report time so far."""
        if self._start is None:
            return 0.0
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000, 3)
