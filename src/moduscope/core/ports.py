"""Port interfaces for sinks, collectors and service lookup.

These protocols define the contracts that adapters and application modules
must implement. The core depends only on these interfaces, not on concrete
implementations.
"""

from collections.abc import Hashable, Mapping
from typing import Any, Protocol, runtime_checkable

from moduscope.core.events.models import EventContext
from moduscope.core.models import LogEntry


@runtime_checkable
class LogSinkPort(Protocol):
    """Port for write-only log destinations.

    Examples: InMemorySink, StreamSink, MongoSink.
    """

    def write(self, record: LogEntry | Mapping[str, Any]) -> None:
        """Write a log record to the destination."""
        ...


@runtime_checkable
class ServiceLocatorPort(Protocol):
    """Port for resolving services by name."""

    def get(self, name: Hashable) -> Any:
        """Return the service registered under name."""
        ...

    def has(self, name: Hashable) -> bool:
        """Return True if name can be resolved."""
        ...


@runtime_checkable
class ModuleConfigProvider(Protocol):
    """Capability of modules that contribute application configuration."""

    def get_config(self) -> Mapping[str, Any]:
        """Return routes, controllers, services and other settings."""
        ...


@runtime_checkable
class FilterConfigProvider(Protocol):
    """Capability of modules that supply filter configuration."""

    def get_filter_config(self) -> Mapping[str, Any]:
        """Return a mapping used to seed the filter plugin container.

        Recognized keys: ``services``, ``factories``, ``aliases`` and
        ``invokables``.
        """
        ...


@runtime_checkable
class CollectorPort(Protocol):
    """Port for profiling collectors run once at the end of a request."""

    @property
    def name(self) -> str: ...

    @property
    def priority(self) -> int: ...

    def collect(self, context: EventContext) -> None:
        """Collect data for the finished request."""
        ...


@runtime_checkable
class EventCollectorPort(CollectorPort, Protocol):
    """Collector that also records data for every triggered event."""

    def collect_event(self, event_id: str, context: EventContext) -> None:
        """Record data for a single event under event_id."""
        ...
