"""Logging helpers shared across the package."""

import logging
import time
from typing import Any

from moduscope.core.models import LogEntry

_PACKAGE_LOGGER = "moduscope"


def get_logger(name: str) -> logging.Logger:
    """Return a stdlib logger below the package namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger whose records propagate to the "moduscope" logger.
    """
    if name == _PACKAGE_LOGGER or name.startswith(f"{_PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_PACKAGE_LOGGER}.{name}")


def log_exception(message: str, **extra: Any) -> None:
    """Log the exception currently being handled, with traceback."""
    get_logger(_PACKAGE_LOGGER).exception(message, extra=extra or None)


def log(level: str, message: str, **extra: Any) -> LogEntry:
    """Create a log entry with automatic timestamp.

    Args:
        level: Log level (e.g., "INFO", "ERROR", "DEBUG")
        message: The log message
        **extra: Additional structured fields

    Returns:
        LogEntry with current timestamp
    """
    return LogEntry(
        timestamp=time.time(),
        level=level.upper(),
        message=message,
        extra=dict(extra),
    )
