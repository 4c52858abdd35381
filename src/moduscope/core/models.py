"""Core domain models for log records."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class LogEntry:
    """A structured log record handed to a sink.

    Attributes:
        timestamp: Unix timestamp in seconds.
        level: Log level (e.g., INFO, ERROR, DEBUG).
        message: The log message.
        extra: Additional structured fields.
    """

    timestamp: float
    level: str
    message: str
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the entry as a plain document."""
        return {
            "timestamp": self.timestamp,
            "level": self.level,
            "message": self.message,
            "extra": dict(self.extra),
        }
