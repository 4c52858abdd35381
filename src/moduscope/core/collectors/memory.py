"""Memory usage collector.

Samples process memory once when the request finishes and once per
triggered event, so memory growth can be attributed to lifecycle stages.
"""

import sys
from typing import Any, Protocol

import psutil

from moduscope.core.collectors.base import AbstractCollector
from moduscope.core.events.context import EventContextProvider
from moduscope.core.events.models import EventContext

if sys.platform == "win32":
    resource = None
else:
    import resource

APPLICATION_EVENT_ID = "application"


class MemoryProbe(Protocol):
    """Source of process memory readings, in bytes."""

    def current(self) -> int: ...

    def peak(self) -> int: ...


class ProcessMemoryProbe:
    """Reads memory of the running process through psutil."""

    def __init__(self) -> None:
        self._process = psutil.Process()

    def current(self) -> int:
        return int(self._process.memory_info().rss)

    def peak(self) -> int:
        info = self._process.memory_info()
        # Windows reports the peak working set directly
        peak = getattr(info, "peak_wset", None)
        if peak is None and resource is not None:
            max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
            # ru_maxrss is bytes on macOS and kilobytes elsewhere
            peak = max_rss if sys.platform == "darwin" else max_rss * 1024
        return max(int(peak or 0), int(info.rss))


class MemoryCollector(AbstractCollector):
    """Collects peak/current memory and per-event memory contexts.

    ``data`` layout::

        {
            "memory": <peak bytes>,
            "end": <current bytes at collect time>,
            "event": {<event id>: [<context>, ...]},
        }

    where each context is ``{"name", "target", "file", "line", "memory"}``.
    Event lists are append-only and keep firing order.
    """

    name = "memory"
    priority = sys.maxsize - 1

    def __init__(self, probe: MemoryProbe | None = None) -> None:
        super().__init__()
        self._probe = probe or ProcessMemoryProbe()

    def collect(self, context: EventContext) -> None:
        """Save peak and current memory for the finished request."""
        self.data["memory"] = self._probe.peak()
        self.data["end"] = self._probe.current()

    def collect_event(self, event_id: str, context: EventContext) -> None:
        """Save the current memory usage for a single event."""
        provider = EventContextProvider(context)
        entry = {
            "name": provider.event.name,
            "target": provider.get_event_target(),
            "file": provider.get_event_trigger_file(),
            "line": provider.get_event_trigger_line(),
            "memory": self._probe.current(),
        }
        self.data.setdefault("event", {}).setdefault(event_id, []).append(entry)

    def get_memory(self) -> int | None:
        """Return the peak memory, or None if collect() never ran."""
        return self.data.get("memory")

    def has_event_memory(self) -> bool:
        """Return True if any event memory was collected."""
        return "event" in self.data

    def get_application_event_memory(self) -> list[dict[str, Any]]:
        """Return application events with the memory delta to the previous one.

        The first entry has no predecessor, so its ``difference`` is its own
        absolute memory.
        """
        events = self.data.get("event", {}).get(APPLICATION_EVENT_ID, [])
        result: list[dict[str, Any]] = []
        previous: dict[str, Any] | None = None
        for context in events:
            entry = dict(context)
            if previous is None:
                entry["difference"] = context["memory"]
            else:
                entry["difference"] = context["memory"] - previous["memory"]
            result.append(entry)
            previous = context
        return result
