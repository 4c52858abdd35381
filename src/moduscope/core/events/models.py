"""Immutable values handed to event listeners."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class EventContext:
    """A single firing of a named event.

    Attributes:
        name: Event channel name (e.g., "route", "finish").
        timestamp: Unix timestamp in seconds at trigger time.
        target: The object (or identifier) the event was triggered on.
        file: Source file of the trigger call.
        line: Source line of the trigger call.
        params: Read-only event payload.
    """

    name: str
    timestamp: float
    target: Any = None
    file: str = ""
    line: int = 0
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.params, MappingProxyType):
            object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def param(self, key: str, default: Any = None) -> Any:
        """Return a single payload value."""
        return self.params.get(key, default)
