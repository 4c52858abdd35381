"""Module class loaded by the ModuleManager."""

from typing import Any

from usuarios.config import module_config


class Module:
    """The usuarios module: routes, controllers and log filters."""

    def get_config(self) -> dict[str, Any]:
        return module_config()

    def get_filter_config(self) -> dict[str, Any]:
        return {"factories": {}, "aliases": {"usuarios.level": "priority"}}
