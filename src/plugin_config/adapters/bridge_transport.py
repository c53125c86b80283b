"""In-process boundary transport running backend handlers on a BackendLoop.

The backend half (handle/on/push) is what config stores talk to. The front
half (invoke/send/listen) is what UI code and RemoteConfig use. Nothing
crosses the boundary by reference: arguments, results and push payloads are
deep-copied, so the front never holds a live backend object.
"""

from __future__ import annotations

import copy
import logging
from concurrent.futures import Future
from typing import Any, Callable

from ..backend_loop import BackendLoop, get_backend_loop
from ..errors import TransportError

logger = logging.getLogger(__name__)


class BridgeTransport:
    def __init__(self, loop: BackendLoop | None = None):
        self._loop = loop or get_backend_loop()
        self._handlers: dict[str, Callable[..., Any]] = {}
        self._listeners: dict[str, list[Callable[..., None]]] = {}
        self._front_listeners: dict[str, list[Callable[[Any], None]]] = {}

    # ------------------------------------------------------------------
    # Backend half
    # ------------------------------------------------------------------
    def handle(self, channel: str, handler: Callable[..., Any]) -> None:
        if channel in self._handlers:
            logger.warning("Replacing handler for channel %s", channel)
        self._handlers[channel] = handler

    def on(self, channel: str, listener: Callable[..., None]) -> None:
        self._listeners.setdefault(channel, []).append(listener)

    def push(self, channel: str, payload: Any) -> None:
        payload = copy.deepcopy(payload)
        try:
            self._loop.call_soon(self._deliver_push, channel, payload)
        except RuntimeError as exc:
            # The backend state is already updated; only the front misses out.
            logger.warning("Dropping push on %s: %s", channel, exc)

    # ------------------------------------------------------------------
    # Front half
    # ------------------------------------------------------------------
    def invoke(self, channel: str, *args: Any) -> Future:
        """Call a backend handler; the Future resolves with its result."""
        try:
            return self._loop.submit(self._serve(channel, copy.deepcopy(args)))
        except RuntimeError as exc:
            future: Future = Future()
            future.set_exception(TransportError(channel, str(exc)))
            return future

    def send(self, channel: str, *args: Any) -> None:
        """Fire-and-forget request to backend listeners."""
        try:
            self._loop.call_soon(self._deliver_request, channel, copy.deepcopy(args))
        except RuntimeError as exc:
            raise TransportError(channel, str(exc)) from exc

    def listen(self, channel: str, callback: Callable[[Any], None]) -> None:
        """Receive backend pushes sent on channel."""
        self._front_listeners.setdefault(channel, []).append(callback)

    # ------------------------------------------------------------------
    # Loop-side delivery
    # ------------------------------------------------------------------
    async def _serve(self, channel: str, args: tuple) -> Any:
        handler = self._handlers.get(channel)
        if handler is None:
            raise TransportError(channel, "no handler registered")
        logger.debug("Serving %s", channel)
        return copy.deepcopy(handler(*args))

    def _deliver_request(self, channel: str, args: tuple) -> None:
        listeners = self._listeners.get(channel)
        if not listeners:
            logger.warning("No listener for channel %s", channel)
            return
        for listener in list(listeners):
            try:
                listener(*args)
            except Exception:
                logger.exception("Listener for %s failed", channel)

    def _deliver_push(self, channel: str, payload: Any) -> None:
        for callback in list(self._front_listeners.get(channel, ())):
            try:
                callback(copy.deepcopy(payload))
            except Exception:
                logger.exception("Front listener for %s failed", channel)
