"""Error types raised by plugin configuration stores and their collaborators."""

from __future__ import annotations


class ConfigStoreError(Exception):
    """Base exception for all plugin config errors."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(self.detail)


class InvalidArgumentError(ConfigStoreError, TypeError):
    """Raised when an operation receives an argument of the wrong shape."""

    def __init__(self, detail: str = "Invalid argument"):
        super().__init__(detail)


class PersistenceError(ConfigStoreError):
    """Raised when a persistence backend fails to load or save a config."""

    def __init__(self, plugin_id: str, detail: str = "Persistence failure"):
        self.plugin_id = plugin_id
        super().__init__(f"{plugin_id}: {detail}")


class TransportError(ConfigStoreError):
    """Raised on the front side when a remote call cannot be delivered."""

    def __init__(self, channel: str, detail: str = "Transport failure"):
        self.channel = channel
        super().__init__(f"{channel}: {detail}")
