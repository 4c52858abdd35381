"""Log record filters usable by every sink."""

import re
from collections.abc import Mapping
from typing import Any

from moduscope.core.exceptions import InvalidArgumentError
from moduscope.services.container import ServiceContainer

LEVEL_SEVERITY = {
    "DEBUG": 10,
    "INFO": 20,
    "NOTICE": 25,
    "WARN": 30,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


class PriorityFilter:
    """Accept records at or above a level threshold.

    Records with a level outside LEVEL_SEVERITY are accepted.
    """

    def __init__(self, priority: str = "INFO") -> None:
        threshold = LEVEL_SEVERITY.get(str(priority).upper())
        if threshold is None:
            raise InvalidArgumentError(f"Unknown log level {priority!r}")
        self._threshold = threshold

    def __call__(self, event: Mapping[str, Any]) -> bool:
        severity = LEVEL_SEVERITY.get(str(event.get("level", "")).upper())
        return severity is None or severity >= self._threshold


class RegexFilter:
    """Accept records whose message matches a regular expression."""

    def __init__(self, regex: str) -> None:
        try:
            self._pattern = re.compile(regex)
        except re.error as exc:
            raise InvalidArgumentError(f"Invalid filter regex {regex!r}: {exc}") from exc

    def __call__(self, event: Mapping[str, Any]) -> bool:
        return self._pattern.search(str(event.get("message", ""))) is not None


def default_filter_manager() -> ServiceContainer:
    """Return a filter plugin container with the built-in filters."""
    return ServiceContainer.from_mapping(
        {"invokables": {"priority": PriorityFilter, "regex": RegexFilter}},
        "filters",
    )
