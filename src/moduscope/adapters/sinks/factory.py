"""Build sinks from configuration."""

from collections.abc import Mapping
from typing import Any

from moduscope.adapters.sinks.base import AbstractSink
from moduscope.adapters.sinks.in_memory import InMemorySink
from moduscope.adapters.sinks.mongo import MongoSink
from moduscope.adapters.sinks.stream import StreamSink
from moduscope.core.exceptions import InvalidArgumentError
from moduscope.core.ports import ServiceLocatorPort

SINK_TYPES = ("memory", "mongo", "stream")


def create_sink(
    spec: Mapping[str, Any], filter_manager: ServiceLocatorPort | None = None
) -> AbstractSink:
    """Create a sink from ``{"type": ..., "options": {...}}``.

    Types:
        memory: InMemorySink; options are the AbstractSink options.
        stream: StreamSink; ``stream`` option plus AbstractSink options.
        mongo: MongoSink; MongoSinkConfig options.

    Raises:
        InvalidArgumentError: For unknown sink types.
    """
    sink_type = str(spec.get("type", "")).lower()
    options = dict(spec.get("options") or {})
    if sink_type == "memory":
        return InMemorySink(options, filter_manager)
    if sink_type == "stream":
        stream = options.pop("stream", None)
        return StreamSink(stream, options, filter_manager)
    if sink_type == "mongo":
        return MongoSink(options, filter_manager=filter_manager)
    raise InvalidArgumentError(
        f"Unknown sink type {spec.get('type')!r}; expected one of {', '.join(SINK_TYPES)}"
    )
