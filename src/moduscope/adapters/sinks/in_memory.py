"""In-memory sink."""

from collections.abc import Mapping
from typing import Any

from moduscope.adapters.sinks.base import AbstractSink
from moduscope.core.ports import ServiceLocatorPort


class InMemorySink(AbstractSink):
    """Keeps written records in a list.

    Suitable for testing and for inspecting logs of a single process.
    Records are stored formatted when a formatter is set.
    """

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        filter_manager: ServiceLocatorPort | None = None,
    ) -> None:
        self._records: list[Any] = []
        super().__init__(options, filter_manager)

    @property
    def records(self) -> list[Any]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    def _do_write(self, event: dict[str, Any]) -> None:
        self._records.append(self._formatter(event) if self._formatter else event)
