"""Typed module configuration.

Modules return plain mappings from ``get_config()``; ModuleConfig turns the
merged mapping into frozen structs and rejects invalid entries at load time,
before any service is built.
"""

from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from moduscope.core.exceptions import InvalidArgumentError

ROUTE_TYPES = frozenset({"literal", "segment"})
_SERVICE_CONFIG_KEYS = frozenset({"services", "factories", "aliases", "invokables"})


def _frozen(mapping: Mapping[Any, Any] | None) -> Mapping[Any, Any]:
    return MappingProxyType(dict(mapping or {}))


def _require_mapping(value: Any, where: str) -> Mapping[Any, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidArgumentError(
            f"{where} must be a mapping, got {type(value).__name__}"
        )
    return value


@dataclass(frozen=True)
class ServiceConfig:
    """Seed data for a ServiceContainer.

    Attributes:
        services: Ready-made instances keyed by name.
        factories: Name to factory (callable or factory class).
        aliases: Alias name to target name.
        invokables: Name to class constructed without arguments.
    """

    services: Mapping[Hashable, Any] = field(default_factory=dict)
    factories: Mapping[Hashable, Callable[..., Any]] = field(default_factory=dict)
    aliases: Mapping[Hashable, Hashable] = field(default_factory=dict)
    invokables: Mapping[Hashable, type] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None, where: str) -> "ServiceConfig":
        """Validate and build a ServiceConfig.

        Raises:
            InvalidArgumentError: On unknown keys, non-callable factories or
                non-class invokables.
        """
        mapping = _require_mapping(mapping, where)
        unknown = set(mapping) - _SERVICE_CONFIG_KEYS
        if unknown:
            raise InvalidArgumentError(
                f"{where} has unknown keys: {', '.join(sorted(map(str, unknown)))}"
            )
        factories = _require_mapping(mapping.get("factories"), f"{where}.factories")
        for name, factory in factories.items():
            if not callable(factory):
                raise InvalidArgumentError(f"{where}.factories[{name!r}] is not callable")
        invokables = _require_mapping(mapping.get("invokables"), f"{where}.invokables")
        for name, target in invokables.items():
            if not isinstance(target, type):
                raise InvalidArgumentError(f"{where}.invokables[{name!r}] is not a class")
        return cls(
            services=_frozen(_require_mapping(mapping.get("services"), f"{where}.services")),
            factories=_frozen(factories),
            aliases=_frozen(_require_mapping(mapping.get("aliases"), f"{where}.aliases")),
            invokables=_frozen(invokables),
        )


@dataclass(frozen=True)
class RouteDefinition:
    """A single entry of the route table.

    Attributes:
        name: Route name, unique among its siblings.
        type: "literal" (exact path) or "segment" (path with parameters).
        route: Path pattern; segment parameters are written ``{name}``.
        defaults: Default route parameters; ``controller`` and ``action``.
        may_terminate: Whether the route matches on its own, or only
            through one of its children.
        child_routes: Routes nested below this one.
    """

    name: str
    type: str
    route: str
    defaults: Mapping[str, Any] = field(default_factory=dict)
    may_terminate: bool = True
    child_routes: tuple["RouteDefinition", ...] = ()

    @property
    def controller(self) -> Hashable | None:
        return self.defaults.get("controller")

    @property
    def action(self) -> str:
        return str(self.defaults.get("action", "index"))

    @classmethod
    def from_mapping(cls, name: str, mapping: Mapping[str, Any]) -> "RouteDefinition":
        """Validate one route entry and its children.

        Raises:
            InvalidArgumentError: On unknown route types, missing or relative
                paths, or terminating routes without a controller.
        """
        where = f"router.routes[{name!r}]"
        mapping = _require_mapping(mapping, where)
        route_type = str(mapping.get("type", "literal")).lower()
        if route_type not in ROUTE_TYPES:
            raise InvalidArgumentError(
                f"{where} has unsupported type {mapping.get('type')!r}; "
                f"expected one of {', '.join(sorted(ROUTE_TYPES))}"
            )
        options = _require_mapping(mapping.get("options"), f"{where}.options")
        path = options.get("route")
        if not isinstance(path, str) or not path.startswith("/"):
            raise InvalidArgumentError(f"{where}.options.route must be a path starting with '/'")
        defaults = _require_mapping(options.get("defaults"), f"{where}.options.defaults")
        may_terminate = bool(mapping.get("may_terminate", True))
        if may_terminate and "controller" not in defaults:
            raise InvalidArgumentError(f"{where} may terminate but names no controller")
        children = _require_mapping(mapping.get("child_routes"), f"{where}.child_routes")
        return cls(
            name=name,
            type=route_type,
            route=path,
            defaults=_frozen(defaults),
            may_terminate=may_terminate,
            child_routes=tuple(
                cls.from_mapping(child_name, child)
                for child_name, child in children.items()
            ),
        )

    def walk(self, prefix: str = "", parent: str = "") -> list[tuple[str, str, "RouteDefinition"]]:
        """Flatten the route tree into (full name, full path, route) tuples.

        Child names are joined with "/" and child paths are appended to the
        parent path. Routes that cannot terminate are left out.
        """
        full_name = f"{parent}/{self.name}" if parent else self.name
        full_path = f"{prefix.rstrip('/')}{self.route}" if prefix else self.route
        flattened = [(full_name, full_path, self)] if self.may_terminate else []
        for child in self.child_routes:
            flattened.extend(child.walk(full_path, full_name))
        return flattened


@dataclass(frozen=True)
class ViewManagerConfig:
    """Template lookup paths keyed by module name.

    Rendering happens outside this package. The stack is validated and
    passed through unchanged so an external view renderer can resolve
    ``<module>/<controller>/<action>`` templates against it.
    """

    template_path_stack: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ModuleConfig:
    """Merged configuration of every loaded module."""

    controllers: ServiceConfig = field(default_factory=ServiceConfig)
    routes: tuple[RouteDefinition, ...] = ()
    service_manager: ServiceConfig = field(default_factory=ServiceConfig)
    filters: ServiceConfig = field(default_factory=ServiceConfig)
    view_manager: ViewManagerConfig = field(default_factory=ViewManagerConfig)
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ModuleConfig":
        """Validate a merged module configuration mapping.

        Keys other than controllers, router, service_manager, filters and
        view_manager are kept unvalidated in ``extra``.
        """
        mapping = _require_mapping(mapping, "config")
        router = _require_mapping(mapping.get("router"), "router")
        routes = _require_mapping(router.get("routes"), "router.routes")
        view_manager = _require_mapping(mapping.get("view_manager"), "view_manager")
        stack = _require_mapping(
            view_manager.get("template_path_stack"), "view_manager.template_path_stack"
        )
        known = {"controllers", "router", "service_manager", "filters", "view_manager"}
        return cls(
            controllers=ServiceConfig.from_mapping(mapping.get("controllers"), "controllers"),
            routes=tuple(
                RouteDefinition.from_mapping(name, route) for name, route in routes.items()
            ),
            service_manager=ServiceConfig.from_mapping(
                mapping.get("service_manager"), "service_manager"
            ),
            filters=ServiceConfig.from_mapping(mapping.get("filters"), "filters"),
            view_manager=ViewManagerConfig(template_path_stack=_frozen(stack)),
            extra=_frozen({k: v for k, v in mapping.items() if k not in known}),
        )
