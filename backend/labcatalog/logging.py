"""
Logging setup for the lab catalog service.

Usage:
    from labcatalog.logging import get_logger
    logger = get_logger(__name__)

    logger.error("Failed operation: %s", err)

Failures are written to stderr; client responses never carry them.
"""

import logging
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level_from_name(level_name: str) -> int:
    level = getattr(logging, level_name.upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level_name: str = "INFO") -> None:
    """Attach a stderr handler to the root logger, once per process."""
    root = logging.getLogger()
    level = _level_from_name(level_name)
    root.setLevel(level)

    # Only configure if no handlers exist (uvicorn/pytest may have installed their own)
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def sanitize_string_for_logging(value: str | None, max_length: int = 100) -> str:
    """
    Make a user-supplied string safe to interpolate into a log line.

    Newlines, carriage returns and tabs are escaped and null bytes dropped, so a
    crafted query parameter cannot forge extra log entries. Long values are
    truncated to `max_length`.
    """
    if not value:
        return "N/A"
    safe_value = (
        str(value)
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = [
    "LOG_FORMAT",
    "configure_logging",
    "get_logger",
    "sanitize_string_for_logging",
]
