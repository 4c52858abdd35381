"""Log sinks implementing LogSinkPort."""

from moduscope.adapters.sinks.base import AbstractSink
from moduscope.adapters.sinks.factory import create_sink
from moduscope.adapters.sinks.filters import (
    PriorityFilter,
    RegexFilter,
    default_filter_manager,
)
from moduscope.adapters.sinks.in_memory import InMemorySink
from moduscope.adapters.sinks.mongo import MongoSink, MongoSinkConfig
from moduscope.adapters.sinks.stream import StreamSink

__all__ = [
    "AbstractSink",
    "InMemorySink",
    "MongoSink",
    "MongoSinkConfig",
    "PriorityFilter",
    "RegexFilter",
    "StreamSink",
    "create_sink",
    "default_filter_manager",
]
