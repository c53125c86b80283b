#!/usr/bin/env python3
"""Plugin config host: serves every plugin's config to the front end"""

import logging
import os
import signal
import sys
import threading

from .adapters.bridge_transport import BridgeTransport
from .adapters.config_env import load_host_config
from .adapters.json_persistence import JsonFilePersistence
from .adapters.menu import RestartingMenu
from .backend_loop import get_backend_loop
from .config import config
from .core.config_model import HostConfig
from .core.defaults import DefaultTable
from .core.registry import expose_registry, get_registry
from .core.store import PluginConfig
from .platform_utils import IS_WINDOWS

logger = logging.getLogger(__name__)


class PluginConfigHost:
    """Backend process owning one boundary-enabled store per plugin"""

    def __init__(self, settings: HostConfig | None = None):
        self.settings = settings or load_host_config()
        if self.settings.defaults_path is not None:
            self.defaults = DefaultTable.from_json(self.settings.defaults_path)
        else:
            self.defaults = DefaultTable()

        self.persistence = JsonFilePersistence(self.settings.store_path)
        self.loop = get_backend_loop()
        self.transport = BridgeTransport(self.loop)
        self.menu = RestartingMenu(self.request_restart, self.settings.restart_on_config_change)
        self.registry = get_registry()
        self.stores: dict[str, PluginConfig] = {}
        self.restart_requested = False
        self._shutdown_event = threading.Event()

    def load_plugins(self):
        """Create a store for every plugin of the default table"""
        for plugin_id in self.defaults:
            self.stores[plugin_id] = PluginConfig(
                plugin_id,
                persistence=self.persistence,
                defaults=self.defaults,
                expose_across_boundary=True,
                transport=self.transport,
                menu=self.menu,
                registry=self.registry,
            )
            logger.debug("Loaded config store for %s", plugin_id)
        expose_registry(self.transport, self.registry)

    def run(self):
        """Run until a shutdown or restart is requested"""
        self.load_plugins()

        print("\n" + "=" * 50)
        print("🔧 Plugin config host")
        print("=" * 50)
        print(f"Store: {self.settings.store_path}")
        print(f"Plugins: {', '.join(self.stores) or '(none)'}")
        print(f"Restart on config change: {self.settings.restart_on_config_change}")
        print("Press Ctrl+C to quit")
        print("=" * 50 + "\n")

        try:
            self._shutdown_event.wait()
        except KeyboardInterrupt:
            pass

        self.shutdown()

    def shutdown(self):
        """Clean shutdown"""
        print("\nShutting down...")
        self._shutdown_event.set()
        self.loop.stop()
        print("✓ Done")

    def request_shutdown(self):
        """Request host shutdown (thread-safe)"""
        self._shutdown_event.set()

    def request_restart(self):
        """Request a shutdown followed by a re-exec of the host"""
        self.restart_requested = True
        self._shutdown_event.set()


def main():
    config.create_dirs()
    settings = load_host_config()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    host = PluginConfigHost(settings)

    def signal_handler(sig, frame):
        host.request_shutdown()

    signal.signal(signal.SIGINT, signal_handler)
    if not IS_WINDOWS:
        signal.signal(signal.SIGTERM, signal_handler)

    host.run()

    if host.restart_requested:
        logger.info("Restarting plugin config host")
        os.execv(sys.executable, [sys.executable, "-m", "plugin_config.main", *sys.argv[1:]])


if __name__ == "__main__":
    main()
