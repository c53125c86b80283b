"""Front-end view of a config store exposed across the boundary.

Every call returns a Future: the operation runs on the backend loop and
settles later with its result, or with the error raised by the store
(TransportError when the call could not be delivered).

Usage:
    remote = RemoteConfig("downloader", transport)
    remote.subscribe("folder", on_folder_changed)
    remote.set("folder", "/tmp/music").result(timeout=5)
    folder = remote.call("get", "folder")
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable

from .config import config
from .core.ports import FrontChannel
from .core.store import changed_channel, operation_channel, subscribe_all_channel, subscribe_channel


class RemoteConfig:
    def __init__(self, plugin_id: str, transport: FrontChannel, timeout: float | None = None):
        self.plugin_id = plugin_id
        self._transport = transport
        self.timeout = config.TRANSPORT_TIMEOUT if timeout is None else timeout

    def get(self, key: str) -> Future:
        return self._invoke("get", key)

    def set(self, key: str, value: Any) -> Future:
        return self._invoke("set", key, value)

    def get_all(self) -> Future:
        return self._invoke("getAll")

    def set_all(self, patch: dict[str, Any]) -> Future:
        return self._invoke("setAll", patch)

    def get_default_config(self) -> Future:
        return self._invoke("getDefaultConfig")

    def set_and_maybe_restart(self, key: str, value: Any) -> Future:
        return self._invoke("setAndMaybeRestart", key, value)

    def call(self, operation: str, *args: Any) -> Any:
        """Invoke an operation by wire name and wait up to timeout for it."""
        return self._invoke(operation, *args).result(timeout=self.timeout)

    def subscribe(self, key: str, callback: Callable[[Any], None]) -> None:
        """Receive the new value of key each time the backend changes it."""
        self._transport.listen(changed_channel(self.plugin_id, key), callback)
        self._transport.send(subscribe_channel(self.plugin_id), key)

    def subscribe_all(self, callback: Callable[[dict[str, Any]], None]) -> None:
        self._transport.listen(changed_channel(self.plugin_id), callback)
        self._transport.send(subscribe_all_channel(self.plugin_id))

    def _invoke(self, operation: str, *args: Any) -> Future:
        return self._transport.invoke(operation_channel(self.plugin_id, operation), *args)
