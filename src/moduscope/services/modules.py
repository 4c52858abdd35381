"""Module loading and configuration merging."""

from collections.abc import Iterable, Mapping
from typing import Any

from moduscope.core.logs import get_logger
from moduscope.core.ports import FilterConfigProvider, ModuleConfigProvider
from moduscope.services.config import ModuleConfig

logger = get_logger(__name__)


def merge_config(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge two config mappings.

    Nested mappings merge key by key, lists are concatenated, any other value
    from override replaces the one in base.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            merged[key] = current + value
        else:
            merged[key] = value
    return merged


class ModuleManager:
    """Loads application modules and merges what they provide.

    Every module exposing ``get_config()`` contributes to the merged config.
    Modules implementing FilterConfigProvider also contribute their filter
    configuration under the ``filters`` key.
    """

    def __init__(self, modules: Iterable[object]) -> None:
        self._modules = list(modules)
        self._config: ModuleConfig | None = None

    @property
    def modules(self) -> list[object]:
        return list(self._modules)

    def merged_mapping(self) -> dict[str, Any]:
        """Return the raw merged configuration of every module."""
        merged: dict[str, Any] = {}
        for module in self._modules:
            if isinstance(module, ModuleConfigProvider):
                merged = merge_config(merged, module.get_config())
            if isinstance(module, FilterConfigProvider):
                merged = merge_config(merged, {"filters": module.get_filter_config()})
        return merged

    def load(self) -> ModuleConfig:
        """Merge and validate module configuration (cached after first call)."""
        if self._config is None:
            self._config = ModuleConfig.from_mapping(self.merged_mapping())
            logger.info(
                "Loaded %d module(s) with %d route(s)",
                len(self._modules),
                len(self._config.routes),
            )
        return self._config
