"""Base class for log sinks."""

from collections.abc import Callable, Mapping
from typing import Any

from moduscope.adapters.sinks.filters import default_filter_manager
from moduscope.core.exceptions import InvalidArgumentError
from moduscope.core.models import LogEntry
from moduscope.core.ports import ServiceLocatorPort

LogFilter = Callable[[Mapping[str, Any]], bool]
Formatter = Callable[[dict[str, Any]], Any]


class AbstractSink:
    """Shared filter and formatter handling for sinks.

    Subclasses implement ``_do_write(event)``; write() turns the record into a
    plain dict and drops it if any filter rejects it.

    Recognized options:
        filters: List of callables, filter names, or
            ``{"name": ..., "options": {...}}`` mappings. Names are built
            through ``filter_manager`` (the built-in filters by default).
        formatter: Callable turning the event dict into the written form.
    """

    _filters: tuple[LogFilter, ...] = ()
    _formatter: Formatter | None = None

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        filter_manager: ServiceLocatorPort | None = None,
    ) -> None:
        options = options or {}
        self._filter_manager = filter_manager
        for spec in options.get("filters") or []:
            self.add_filter(spec)
        if options.get("formatter") is not None:
            self.set_formatter(options["formatter"])

    def add_filter(self, spec: LogFilter | str | Mapping[str, Any]) -> "AbstractSink":
        """Add a filter given as a callable, a name, or a name with options.

        Raises:
            InvalidArgumentError: If spec is none of the supported forms.
        """
        if isinstance(spec, str):
            log_filter = self._build_filter(spec, None)
        elif isinstance(spec, Mapping):
            if "name" not in spec:
                raise InvalidArgumentError("Filter mapping needs a 'name' key")
            log_filter = self._build_filter(spec["name"], spec.get("options"))
        elif callable(spec):
            log_filter = spec
        else:
            raise InvalidArgumentError(f"Invalid filter {spec!r}")
        self._filters = (*self._filters, log_filter)
        return self

    def _build_filter(self, name: str, options: Mapping[str, Any] | None) -> LogFilter:
        if self._filter_manager is None:
            self._filter_manager = default_filter_manager()
        builder = getattr(self._filter_manager, "build", None)
        if builder is not None:
            return builder(name, options)
        return self._filter_manager.get(name)

    def set_formatter(self, formatter: Formatter) -> "AbstractSink":
        self._formatter = formatter
        return self

    def write(self, record: LogEntry | Mapping[str, Any]) -> None:
        """Write a record unless a filter rejects it."""
        event = record.to_dict() if isinstance(record, LogEntry) else dict(record)
        for log_filter in self._filters:
            if not log_filter(event):
                return
        self._do_write(event)

    def _do_write(self, event: dict[str, Any]) -> None:
        raise NotImplementedError
