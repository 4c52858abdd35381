"""Application wiring.

Builds the containers, event channels and sink from a list of modules and
exposes the whole thing as an ASGI application.
"""

from collections.abc import Hashable, Iterable, Mapping
from typing import Any

from fastapi import FastAPI

from moduscope.adapters.frameworks.asgi import ASGILifecycleMiddleware
from moduscope.adapters.frameworks.fastapi import create_module_router
from moduscope.adapters.sinks.factory import create_sink
from moduscope.adapters.sinks.filters import default_filter_manager
from moduscope.core.collectors.memory import MemoryCollector, MemoryProbe
from moduscope.core.collectors.profiler import Profiler
from moduscope.core.events.channels import EventChannels
from moduscope.core.logs import get_logger
from moduscope.core.ports import LogSinkPort
from moduscope.services.config import ModuleConfig
from moduscope.services.container import ServiceContainer
from moduscope.services.modules import ModuleManager

logger = get_logger(__name__)

CONFIG_SERVICE = "config"
CHANNELS_SERVICE = "EventChannels"
CONTROLLERS_SERVICE = "ControllerManager"
FILTERS_SERVICE = "FilterManager"
SINK_SERVICE = "LogSink"


class Application:
    """The wired application.

    Attributes:
        config: Merged and validated module configuration.
        services: Application services (service_manager config plus the
            core objects registered under the *_SERVICE names).
        controllers: Controllers from the ``controllers`` config.
        filters: Log filter plugins (built-ins plus ``filters`` config).
        channels: Event channels shared by the lifecycle and listeners.
        sink: Request log sink, if any.
    """

    def __init__(
        self,
        config: ModuleConfig,
        services: ServiceContainer,
        controllers: ServiceContainer,
        filters: ServiceContainer,
        channels: EventChannels,
        sink: LogSinkPort | None = None,
        probe: MemoryProbe | None = None,
    ) -> None:
        self.config = config
        self.services = services
        self.controllers = controllers
        self.filters = filters
        self.channels = channels
        self.sink = sink
        self._probe = probe

    @classmethod
    def from_modules(
        cls,
        modules: Iterable[object],
        services: Mapping[Hashable, Any] | None = None,
        sink: LogSinkPort | None = None,
        probe: MemoryProbe | None = None,
    ) -> "Application":
        """Load modules and wire every container.

        Args:
            modules: Application modules, in load order.
            services: Ready-made instances added to the service container,
                e.g. the default ORM entity manager.
            sink: Request log sink. When omitted, a ``log`` entry of the
                merged config (``{"type": ..., "options": {...}}``) is used.
            probe: Memory probe for the per-request memory collector.
        """
        config = ModuleManager(modules).load()
        filters = default_filter_manager()
        filters.configure(config.filters)
        if sink is None and config.extra.get("log"):
            sink = create_sink(config.extra["log"], filters)

        channels = EventChannels()
        controllers = ServiceContainer(config.controllers)
        container = ServiceContainer(config.service_manager)
        for name, instance in (services or {}).items():
            container.set_service(name, instance)
        container.set_service(CONFIG_SERVICE, config)
        container.set_service(CHANNELS_SERVICE, channels)
        container.set_service(CONTROLLERS_SERVICE, controllers)
        container.set_service(FILTERS_SERVICE, filters)
        if sink is not None:
            container.set_service(SINK_SERVICE, sink)

        return cls(config, container, controllers, filters, channels, sink, probe)

    def create_profiler(self, request_id: str | None = None) -> Profiler:
        """Return a fresh profiler holding a memory collector.

        With a request id the profiler only observes that request's events.
        """
        return Profiler([MemoryCollector(self._probe)], request_id=request_id)

    def create_asgi_app(
        self, title: str = "moduscope", exclude_paths: list[str] | None = None
    ) -> ASGILifecycleMiddleware:
        """Build the FastAPI app for the route table wrapped in the lifecycle middleware."""
        api = FastAPI(title=title)
        api.include_router(create_module_router(self.config, self.controllers, self.channels))
        logger.info("Created ASGI app with %d route(s)", len(api.routes))
        return ASGILifecycleMiddleware(
            api,
            self.channels,
            sink=self.sink,
            profiler_factory=self.create_profiler,
            exclude_paths=exclude_paths,
        )
