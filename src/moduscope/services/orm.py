"""Service wiring for the ORM bridge."""

from typing import Any

from moduscope.services.factories import (
    ENTITY_MANAGER_SERVICE,
    EntityManagerAliasCompatFactory,
)

ENTITY_MANAGER_ALIAS = "orm.EntityManager"


class OrmModule:
    """Registers the legacy entity manager name.

    The entity manager itself is registered by the application under
    ``orm.entitymanager.orm_default``.
    """

    def get_config(self) -> dict[str, Any]:
        return {
            "service_manager": {
                "factories": {
                    ENTITY_MANAGER_ALIAS: EntityManagerAliasCompatFactory,
                },
            },
        }


__all__ = ["ENTITY_MANAGER_ALIAS", "ENTITY_MANAGER_SERVICE", "OrmModule"]
