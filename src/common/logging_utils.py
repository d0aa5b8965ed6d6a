"""Logging helpers shared by the resolver and classpath modules.

Keeps structured ``extra=`` payloads consistent across modules and makes sure
URLs and repository descriptions never carry credentials into log records.
"""
from __future__ import annotations

import logging
import os
import time
import urllib.parse
from typing import Any, Dict, Optional

from constants import Constants

# Keys allowed in structured log payloads; anything else is dropped.
_CONTEXT_KEYS = {
    "event",
    "component",
    "action",
    "outcome",
    "target",
    "artifact",
    "scope",
    "repository",
    "local_repository",
    "count",
    "duration_ms",
    "attempt",
    "context",
}


def configure_logging(level: Optional[str] = None) -> None:
    """Install a root handler using the project log format.

    Args:
        level: Level name; defaults to $AETHER_LOG_LEVEL or INFO.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level_value)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**kwargs: Any) -> Dict[str, Any]:
    """Build an ``extra=`` payload, keeping known keys with non-None values."""
    return {k: v for k, v in kwargs.items() if k in _CONTEXT_KEYS and v is not None}


def safe_url(url: Optional[str]) -> str:
    """Strip user info, query and fragment from a URL before logging it."""
    if not url:
        return ""
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError:
        return "<invalid-url>"
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urllib.parse.urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds; measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
