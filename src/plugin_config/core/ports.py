"""Core ports (interfaces) for plugin configuration stores.

These protocols define the boundaries between a store and the collaborators
it is wired to: where overrides are persisted, how operations cross the
process boundary, and how the application menu is told about changes.
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class PersistenceBackend(Protocol):
    """Durable storage for a plugin's user overrides."""

    def load(self, plugin_id: str) -> dict[str, Any] | None:
        """Return the persisted overrides for plugin_id, or None."""

    def save(self, plugin_id: str, config: dict[str, Any]) -> None:
        """Persist the full live config of plugin_id."""


@runtime_checkable
class Transport(Protocol):
    """Backend half of the process-boundary channel."""

    def handle(self, channel: str, handler: Callable[..., Any]) -> None:
        """Serve request/response calls on channel with handler(*args)."""

    def on(self, channel: str, listener: Callable[..., None]) -> None:
        """Listen for fire-and-forget requests on channel."""

    def push(self, channel: str, payload: Any) -> None:
        """Send a fire-and-forget message to the front end."""


@runtime_checkable
class FrontChannel(Protocol):
    """Front half of the process-boundary channel."""

    def invoke(self, channel: str, *args: Any) -> Future:
        """Call a backend handler; the Future settles with its result or error."""

    def send(self, channel: str, *args: Any) -> None:
        """Fire-and-forget request to the backend."""

    def listen(self, channel: str, callback: Callable[[Any], None]) -> None:
        """Receive backend pushes on channel."""


@runtime_checkable
class MenuController(Protocol):
    """Application menu that mirrors menu-driven plugin options."""

    def set_menu_options(self, plugin_id: str, config: dict[str, Any]) -> None:
        """Apply the updated options of plugin_id to the menu."""
