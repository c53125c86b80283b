"""The backend's single event loop.

Config stores are not locked: they rely on every cross-boundary request,
fire-and-forget listener and push delivery running one at a time. This
module owns the one asyncio loop (on its own daemon thread) that all of
that work is queued onto, in arrival order.
"""

import asyncio
import atexit
import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, Coroutine

logger = logging.getLogger(__name__)

THREAD_NAME = "PluginConfig-BackendLoop"
_STARTUP_TIMEOUT = 5.0


class BackendLoop:
    """Serial executor for backend work, backed by one asyncio loop."""

    def __init__(self):
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._ready = threading.Event()
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        loop = self._loop
        return loop is not None and loop.is_running() and self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Spawn the loop thread; a no-op while it is alive."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return

            self._ready.clear()
            self._thread = threading.Thread(target=self._serve, name=THREAD_NAME, daemon=True)
            self._thread.start()
            if not self._ready.wait(_STARTUP_TIMEOUT):
                raise RuntimeError("Backend loop did not come up")
            logger.debug("Backend loop started")

    def stop(self) -> None:
        """Stop the loop, cancel leftover tasks and join the thread."""
        with self._lock:
            loop, thread = self._loop, self._thread
            if loop is not None:
                loop.call_soon_threadsafe(loop.stop)
            if thread is not None:
                thread.join(_STARTUP_TIMEOUT)
            self._thread = None
            self._ready.clear()

    def submit(self, coro: Coroutine[Any, Any, Any]) -> Future:
        """Queue a request coroutine; its Future settles with the outcome."""
        loop = self._loop
        if loop is None:
            coro.close()
            raise RuntimeError("Backend loop is not running")
        return asyncio.run_coroutine_threadsafe(coro, loop)

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue a plain callback behind everything already submitted."""
        loop = self._loop
        if loop is None:
            raise RuntimeError("Backend loop is not running")
        loop.call_soon_threadsafe(callback, *args)

    def _serve(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._ready.set()
        try:
            loop.run_forever()
        finally:
            self._loop = None
            leftovers = asyncio.all_tasks(loop)
            for task in leftovers:
                task.cancel()
            if leftovers:
                loop.run_until_complete(asyncio.gather(*leftovers, return_exceptions=True))
            loop.close()
            logger.debug("Backend loop stopped")


_default_loop: BackendLoop | None = None
_default_lock = threading.Lock()


def get_backend_loop() -> BackendLoop:
    """Return the process-wide loop, (re)starting it when needed."""
    global _default_loop

    with _default_lock:
        if _default_loop is None:
            _default_loop = BackendLoop()
            atexit.register(reset_backend_loop)
        _default_loop.start()
        return _default_loop


def reset_backend_loop() -> None:
    """Stop the process-wide loop and forget it."""
    global _default_loop

    with _default_lock:
        if _default_loop is not None:
            _default_loop.stop()
        _default_loop = None
