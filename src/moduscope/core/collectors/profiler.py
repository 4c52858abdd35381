"""Profiler that runs collectors on lifecycle events."""

import copy
from typing import Any

from moduscope.core.collectors.memory import APPLICATION_EVENT_ID
from moduscope.core.events.channels import WILDCARD, EventChannels, Listener
from moduscope.core.events.models import EventContext
from moduscope.core.logs import get_logger
from moduscope.core.ports import CollectorPort, EventCollectorPort

logger = get_logger(__name__)

FINISH_EVENT = "finish"

# Collect after every regular finish listener has run
PRIORITY_PROFILING = -10000
# Record events before regular listeners change memory
PRIORITY_EVENT_LOGGING = 10000


class Profiler:
    """Holds collectors and wires them to event channels.

    Collectors run in descending priority order. Collectors that also
    implement ``collect_event`` receive every triggered event under the
    ``"application"`` id once the profiler is attached.

    A profiler bound to a ``request_id`` only observes events whose
    ``request_id`` param matches, so profilers of overlapping requests
    can share one set of channels.
    """

    def __init__(
        self,
        collectors: list[CollectorPort] | None = None,
        request_id: str | None = None,
    ) -> None:
        self.request_id = request_id
        self._collectors: dict[str, CollectorPort] = {}
        self._subscriptions: list[tuple[EventChannels, str, Listener]] = []
        for collector in collectors or []:
            self.add_collector(collector)

    def add_collector(self, collector: CollectorPort) -> None:
        """Register a collector.

        Raises:
            ValueError: If a collector with the same name is registered.
        """
        if collector.name in self._collectors:
            raise ValueError(f"Collector '{collector.name}' already registered")
        self._collectors[collector.name] = collector

    def get_collector(self, name: str) -> CollectorPort | None:
        return self._collectors.get(name)

    @property
    def collectors(self) -> list[CollectorPort]:
        """Collectors in the order collect() runs them."""
        return sorted(self._collectors.values(), key=lambda c: -c.priority)

    def attach(self, channels: EventChannels) -> "Profiler":
        """Subscribe to the finish channel and to every event."""
        self._subscribe(channels, WILDCARD, self._on_event, PRIORITY_EVENT_LOGGING)
        self._subscribe(channels, FINISH_EVENT, self._on_finish, PRIORITY_PROFILING)
        return self

    def detach(self) -> None:
        """Remove every subscription made by attach()."""
        for channels, name, listener in self._subscriptions:
            channels.unsubscribe(name, listener)
        self._subscriptions.clear()

    def _subscribe(
        self, channels: EventChannels, name: str, listener: Listener, priority: int
    ) -> None:
        channels.subscribe(name, listener, priority)
        self._subscriptions.append((channels, name, listener))

    def observes(self, context: EventContext) -> bool:
        """Return True if context belongs to the request this profiler watches."""
        if self.request_id is None:
            return True
        return context.param("request_id") == self.request_id

    def _on_event(self, context: EventContext) -> None:
        if self.observes(context):
            self.collect_event(APPLICATION_EVENT_ID, context)

    def _on_finish(self, context: EventContext) -> None:
        if self.observes(context):
            self.collect(context)

    def collect_event(self, event_id: str, context: EventContext) -> None:
        """Forward one event to every event collector."""
        for collector in self.collectors:
            if isinstance(collector, EventCollectorPort):
                collector.collect_event(event_id, context)

    def collect(self, context: EventContext) -> None:
        """Run every collector for the finished request."""
        for collector in self.collectors:
            collector.collect(context)
        logger.debug("Collected %d profiler collector(s)", len(self._collectors))

    def report(self) -> dict[str, Any]:
        """Return a snapshot of every collector's data keyed by name."""
        return {
            collector.name: copy.deepcopy(getattr(collector, "data", {}))
            for collector in self.collectors
        }
