"""Reactive per-plugin configuration store.

A store merges a plugin's built-in defaults with its persisted overrides,
notifies subscribers when values change and writes every mutation back to
the persistence backend. When asked to, it also projects its read/write
operations and change events across the process boundary so front-end code
can drive the same config remotely.

Usage:
    store = PluginConfig("downloader", persistence=backend, defaults=table)
    store.subscribe("folder", lambda folder: print("now saving to", folder))
    store.set("folder", "/tmp/music")
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any, Callable

from ..errors import InvalidArgumentError
from .defaults import DefaultTable
from .ports import MenuController, PersistenceBackend, Transport
from .registry import PluginRegistry, get_registry

logger = logging.getLogger(__name__)

# Marks a field missing from the live config
_MISSING = object()

KeyCallback = Callable[[Any], None]
AllCallback = Callable[[dict[str, Any]], None]


def operation_channel(plugin_id: str, operation: str) -> str:
    return f"{plugin_id}-config-{operation}"


def subscribe_channel(plugin_id: str) -> str:
    return f"{plugin_id}-config-subscribe"


def subscribe_all_channel(plugin_id: str) -> str:
    return f"{plugin_id}-config-subscribe-all"


def changed_channel(plugin_id: str, key: str | None = None) -> str:
    """Push channel for one field, or for the whole config when key is None."""
    if key is None:
        return f"{plugin_id}-config-changed"
    return f"{plugin_id}-config-changed-{key}"


class PluginConfig:
    """Live configuration of a single plugin."""

    def __init__(
        self,
        plugin_id: str,
        *,
        persistence: PersistenceBackend,
        defaults: DefaultTable | None = None,
        expose_across_boundary: bool = False,
        initial_overrides: Mapping[str, Any] | None = None,
        transport: Transport | None = None,
        menu: MenuController | None = None,
        registry: PluginRegistry | None = None,
    ):
        """Build the store and register it.

        Args:
            plugin_id: Unique plugin identifier.
            persistence: Backend that loads overrides and saves mutations.
            defaults: Default table; a plugin without an entry gets {}.
            expose_across_boundary: Serve operations and change pushes
                through transport.
            initial_overrides: Overrides used instead of the persisted ones.
            transport: Backend half of the process boundary.
            menu: Menu told about set_and_maybe_restart changes.
            registry: Registry to join (process-wide one by default).
        """
        if expose_across_boundary and transport is None:
            raise ValueError(f"{plugin_id}: exposing a config across the boundary needs a transport")

        self.plugin_id = plugin_id
        self.expose_across_boundary = expose_across_boundary
        self._persistence = persistence
        self._transport = transport
        self._menu = menu

        self._defaults: dict[str, Any] = (defaults or DefaultTable()).get(plugin_id)
        if initial_overrides is not None:
            overrides = copy.deepcopy(dict(initial_overrides))
        else:
            overrides = persistence.load(plugin_id) or {}
        self._live: dict[str, Any] = {**copy.deepcopy(self._defaults), **overrides}

        self._subscribers: dict[str, KeyCallback] = {}
        self._all_subscribers: list[AllCallback] = []

        # Remotely callable surface, keyed by wire name
        self._operations: dict[str, Callable[..., Any]] = {
            "get": self.get,
            "set": self.set,
            "getAll": self.get_all,
            "setAll": self.set_all,
            "getDefaultConfig": self.get_default_config,
            "setAndMaybeRestart": self.set_and_maybe_restart,
        }

        if self.expose_across_boundary:
            self._setup_front()

        (registry or get_registry()).register(self)

    def get(self, key: str) -> Any:
        return self._live.get(key)

    def get_all(self) -> dict[str, Any]:
        return dict(self._live)

    def get_default_config(self) -> dict[str, Any]:
        return copy.deepcopy(self._defaults)

    def set(self, key: str, value: Any) -> None:
        self._live[key] = value
        self._notify(key)
        self._persist()

    def set_all(self, patch: Mapping[str, Any]) -> None:
        """Apply several values, firing all-subscribers at most once.

        Per-key subscribers fire for each changed key. None is stored like
        any other value, so it clears a field. The config is persisted once
        even when nothing changed.
        """
        if not isinstance(patch, Mapping):
            raise InvalidArgumentError(f"{self.plugin_id}: options must be a mapping, got {type(patch).__name__}")

        changed = False
        for key, value in patch.items():
            current = self._live.get(key, _MISSING)
            if current is value or current == value:
                continue
            if value is not _MISSING:
                self._live[key] = value
            self._notify(key, bulk=False)
            changed = True

        if changed:
            for callback in list(self._all_subscribers):
                callback(self.get_all())

        self._persist()

    def set_and_maybe_restart(self, key: str, value: Any) -> None:
        """Set an option that also lives in the app menu.

        The menu decides whether the host restarts. The store does not
        persist in this path.
        """
        self._live[key] = value
        if self._menu is not None:
            self._menu.set_menu_options(self.plugin_id, self.get_all())
        else:
            logger.debug("No menu attached to %s; skipping menu update for %s", self.plugin_id, key)
        self._notify(key)

    def subscribe(self, key: str, callback: KeyCallback) -> None:
        """Call callback with the new value whenever key changes.

        Only one callback is kept per key; a later one replaces it.
        """
        self._subscribers[key] = callback

    def subscribe_all(self, callback: AllCallback) -> None:
        self._all_subscribers.append(callback)

    def describe(self) -> dict[str, Any]:
        return {
            "plugin_id": self.plugin_id,
            "expose_across_boundary": self.expose_across_boundary,
            "config": self.get_all(),
            "default_config": self.get_default_config(),
        }

    def _notify(self, key: str, bulk: bool = True) -> None:
        callback = self._subscribers.get(key)
        if callback is not None:
            callback(self._live.get(key))

        if bulk:
            for callback in list(self._all_subscribers):
                callback(self.get_all())

    def _persist(self) -> None:
        logger.debug("Saving config of %s", self.plugin_id)
        self._persistence.save(self.plugin_id, self.get_all())

    def _setup_front(self) -> None:
        transport = self._transport
        plugin_id = self.plugin_id

        for name, operation in self._operations.items():
            transport.handle(operation_channel(plugin_id, name), operation)

        def on_subscribe(key: str) -> None:
            channel = changed_channel(plugin_id, key)
            self.subscribe(key, lambda value: transport.push(channel, value))

        def on_subscribe_all() -> None:
            channel = changed_channel(plugin_id)
            self.subscribe_all(lambda config: transport.push(channel, config))

        transport.on(subscribe_channel(plugin_id), on_subscribe)
        transport.on(subscribe_all_channel(plugin_id), on_subscribe_all)
        logger.debug("Exposed config of %s across the boundary", plugin_id)
