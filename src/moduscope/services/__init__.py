"""Service wiring: typed config, container, factories and module loading."""

from moduscope.services.config import (
    ModuleConfig,
    RouteDefinition,
    ServiceConfig,
    ViewManagerConfig,
)
from moduscope.services.container import ServiceContainer
from moduscope.services.factories import (
    ENTITY_MANAGER_SERVICE,
    EntityManagerAliasCompatFactory,
    InvokableFactory,
)
from moduscope.services.modules import ModuleManager, merge_config
from moduscope.services.orm import ENTITY_MANAGER_ALIAS, OrmModule

__all__ = [
    "ENTITY_MANAGER_ALIAS",
    "ENTITY_MANAGER_SERVICE",
    "EntityManagerAliasCompatFactory",
    "InvokableFactory",
    "ModuleConfig",
    "ModuleManager",
    "OrmModule",
    "RouteDefinition",
    "ServiceConfig",
    "ServiceContainer",
    "ViewManagerConfig",
    "merge_config",
]
