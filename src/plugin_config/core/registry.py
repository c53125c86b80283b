"""Process-wide registry of live plugin config stores.

Every store registers itself when constructed. Registration is last write
wins: a second store built for the same plugin id silently replaces the
first in the registry, while the first instance keeps working on its own
state. Entries are never removed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .ports import Transport
    from .store import PluginConfig

logger = logging.getLogger(__name__)

ACTIVE_PLUGINS_CHANNEL = "get-active-plugins"


class PluginRegistry:
    def __init__(self):
        self._stores: dict[str, PluginConfig] = {}

    def register(self, store: PluginConfig) -> None:
        if store.plugin_id in self._stores and self._stores[store.plugin_id] is not store:
            logger.debug("Replacing registered config store for %s", store.plugin_id)
        self._stores[store.plugin_id] = store

    def get(self, plugin_id: str) -> PluginConfig | None:
        return self._stores.get(plugin_id)

    def is_active(self, plugin_id: str) -> bool:
        return plugin_id in self._stores

    def active_plugins(self) -> dict[str, PluginConfig]:
        """Return a copy of the plugin id -> store mapping."""
        return dict(self._stores)

    def describe(self) -> dict[str, dict[str, Any]]:
        """Return plugin id -> the externally visible identity of its store."""
        return {plugin_id: store.describe() for plugin_id, store in self._stores.items()}


def expose_registry(transport: Transport, registry: PluginRegistry | None = None) -> None:
    """Serve registry introspection on the get-active-plugins channel."""
    registry = registry or get_registry()
    transport.handle(ACTIVE_PLUGINS_CHANNEL, registry.describe)


# Module-level singleton
_registry_instance: PluginRegistry | None = None


def get_registry() -> PluginRegistry:
    """Get the process-wide PluginRegistry, creating it on first call."""
    global _registry_instance

    if _registry_instance is None:
        _registry_instance = PluginRegistry()
    return _registry_instance


def reset_registry() -> None:
    """Drop the process-wide registry (for testing).

    The next call to get_registry() creates an empty one.
    """
    global _registry_instance
    _registry_instance = None
