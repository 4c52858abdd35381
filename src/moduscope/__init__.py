"""moduscope: module wiring, memory profiling and log sinks for web apps."""

from moduscope.adapters.frameworks.asgi import ASGILifecycleMiddleware
from moduscope.adapters.logging import SinkHandler, configure_logging
from moduscope.adapters.sinks import (
    InMemorySink,
    MongoSink,
    PriorityFilter,
    RegexFilter,
    StreamSink,
    create_sink,
)
from moduscope.application import Application
from moduscope.controllers import AbstractActionController
from moduscope.core.collectors import MemoryCollector, Profiler
from moduscope.core.events import EventChannels, EventContext
from moduscope.core.exceptions import (
    ActionNotFoundError,
    ExtensionNotLoadedError,
    InvalidArgumentError,
    ModuscopeError,
    ServiceNotFoundError,
    SinkRuntimeError,
)
from moduscope.core.logs import get_logger, log
from moduscope.core.models import LogEntry
from moduscope.core.ports import FilterConfigProvider, LogSinkPort
from moduscope.services import (
    EntityManagerAliasCompatFactory,
    InvokableFactory,
    ModuleConfig,
    ModuleManager,
    ServiceContainer,
)

__all__ = [
    "ASGILifecycleMiddleware",
    "AbstractActionController",
    "ActionNotFoundError",
    "Application",
    "EntityManagerAliasCompatFactory",
    "EventChannels",
    "EventContext",
    "ExtensionNotLoadedError",
    "FilterConfigProvider",
    "InMemorySink",
    "InvalidArgumentError",
    "InvokableFactory",
    "LogEntry",
    "LogSinkPort",
    "MemoryCollector",
    "ModuleConfig",
    "ModuleManager",
    "ModuscopeError",
    "MongoSink",
    "PriorityFilter",
    "Profiler",
    "RegexFilter",
    "ServiceContainer",
    "ServiceNotFoundError",
    "SinkHandler",
    "SinkRuntimeError",
    "StreamSink",
    "configure_logging",
    "create_sink",
    "get_logger",
    "log",
]
