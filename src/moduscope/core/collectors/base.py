"""Base class for profiling collectors."""

from typing import Any

from moduscope.core.events.models import EventContext


class AbstractCollector:
    """Shared state for collectors.

    Subclasses set ``name`` and ``priority`` and fill ``data`` from
    collect(). ``data`` is a plain dict so a finished profile can be
    serialized without knowing the collector type.
    """

    name: str = ""
    priority: int = 0

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}

    def collect(self, context: EventContext) -> None:
        raise NotImplementedError

    def reset(self) -> None:
        """Drop everything collected so far."""
        self.data = {}
