"""Reusable service factories."""

from collections.abc import Hashable, Mapping
from typing import Any

from moduscope.core.exceptions import InvalidArgumentError
from moduscope.core.ports import ServiceLocatorPort

ENTITY_MANAGER_SERVICE = "orm.entitymanager.orm_default"


class InvokableFactory:
    """Create a service by calling the requested class.

    ``options`` are passed as keyword arguments.
    """

    def __call__(
        self,
        container: ServiceLocatorPort,
        requested_name: Hashable,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        if not isinstance(requested_name, type):
            raise InvalidArgumentError(
                f"InvokableFactory needs a class name, got {requested_name!r}"
            )
        return requested_name(**(options or {}))


class EntityManagerAliasCompatFactory:
    """Provide the legacy entity manager name for the default ORM entity manager.

    Deprecated: kept so that lookups by the old name keep working. It
    returns whatever the container holds under ``orm.entitymanager.orm_default``.
    """

    def __call__(
        self,
        container: ServiceLocatorPort,
        requested_name: Hashable,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        return container.get(ENTITY_MANAGER_SERVICE)
