"""Explicit service container.

Collaborators are registered up front and passed in where they are needed;
nothing is looked up from a process-wide registry.
"""

from collections.abc import Callable, Hashable, Mapping
from typing import Any

from moduscope.core.exceptions import InvalidArgumentError, ServiceNotFoundError
from moduscope.core.logs import get_logger
from moduscope.services.config import ServiceConfig
from moduscope.services.factories import InvokableFactory

logger = get_logger(__name__)

# factory(container, requested_name, options) -> service
Factory = Callable[..., Any]


class ServiceContainer:
    """Resolves names to shared service instances.

    Names may be strings or classes. Factories are called as
    ``factory(container, requested_name, options)``; a factory given as a
    class is instantiated first. Instances created through get() are cached,
    so every alias of a service yields the same object.
    """

    def __init__(self, config: ServiceConfig | None = None) -> None:
        self._services: dict[Hashable, Any] = {}
        self._factories: dict[Hashable, Factory] = {}
        self._aliases: dict[Hashable, Hashable] = {}
        if config is not None:
            self.configure(config)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], where: str = "services") -> "ServiceContainer":
        return cls(ServiceConfig.from_mapping(mapping, where))

    def configure(self, config: ServiceConfig) -> None:
        """Register everything a ServiceConfig declares."""
        for name, instance in config.services.items():
            self.set_service(name, instance)
        for name, factory in config.factories.items():
            self.set_factory(name, factory)
        for name, target in config.invokables.items():
            if name != target:
                self.set_alias(name, target)
            self.set_factory(target, InvokableFactory)
        for alias, target in config.aliases.items():
            self.set_alias(alias, target)

    def set_service(self, name: Hashable, instance: Any) -> None:
        self._services[name] = instance

    def set_factory(self, name: Hashable, factory: Factory | type) -> None:
        """Register a factory for name.

        Raises:
            TypeError: If factory is not callable.
        """
        if not callable(factory):
            raise TypeError(f"factory for {name!r} must be callable")
        if isinstance(factory, type):
            factory = factory()
        self._factories[name] = factory

    def set_alias(self, alias: Hashable, target: Hashable) -> None:
        """Make alias resolve to target.

        Raises:
            InvalidArgumentError: If the alias would create a cycle.
        """
        if alias == target:
            raise InvalidArgumentError(f"Service {alias!r} cannot alias itself")
        self._aliases[alias] = target
        try:
            self.resolve_alias(alias)
        except InvalidArgumentError:
            del self._aliases[alias]
            raise

    def resolve_alias(self, name: Hashable) -> Hashable:
        """Follow aliases until a non-alias name is reached."""
        seen = [name]
        while name in self._aliases:
            name = self._aliases[name]
            if name in seen:
                cycle = " -> ".join(repr(n) for n in [*seen, name])
                raise InvalidArgumentError(f"Circular alias detected: {cycle}")
            seen.append(name)
        return name

    def has(self, name: Hashable) -> bool:
        resolved = self.resolve_alias(name)
        return resolved in self._services or resolved in self._factories

    def get(self, name: Hashable) -> Any:
        """Return the shared instance for name, creating it on first use.

        Raises:
            ServiceNotFoundError: If neither a service nor a factory is
                registered for name.
        """
        resolved = self.resolve_alias(name)
        if resolved in self._services:
            return self._services[resolved]
        instance = self._create(resolved, name, None)
        self._services[resolved] = instance
        return instance

    def build(self, name: Hashable, options: Mapping[str, Any] | None = None) -> Any:
        """Create a new, uncached instance for name."""
        resolved = self.resolve_alias(name)
        return self._create(resolved, name, options)

    def _create(
        self, resolved: Hashable, requested: Hashable, options: Mapping[str, Any] | None
    ) -> Any:
        factory = self._factories.get(resolved)
        if factory is None:
            raise ServiceNotFoundError(f"Unable to resolve service {requested!r}")
        logger.debug("Creating service %r", resolved)
        return factory(self, resolved, options)
