"""Helpers for describing where and on what an event was triggered."""

from typing import Any

from moduscope.core.events.models import EventContext


def target_identifier(target: Any) -> str:
    """Return a printable identifier for an event target.

    Strings are returned unchanged, None becomes an empty string, classes and
    instances are named by their fully qualified class name.
    """
    if target is None:
        return ""
    if isinstance(target, str):
        return target
    cls = target if isinstance(target, type) else type(target)
    return f"{cls.__module__}.{cls.__qualname__}"


class EventContextProvider:
    """Read-only view over an EventContext used by collectors."""

    def __init__(self, context: EventContext) -> None:
        self._context = context

    @property
    def event(self) -> EventContext:
        return self._context

    def get_event_target(self) -> str:
        return target_identifier(self._context.target)

    def get_event_trigger_file(self) -> str:
        return self._context.file

    def get_event_trigger_line(self) -> int:
        return self._context.line
