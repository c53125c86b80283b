"""Menu adapter that restarts the host on menu-driven option changes."""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..config import config

logger = logging.getLogger(__name__)


class RestartingMenu:
    def __init__(self, restart: Callable[[], None], restart_on_change: bool | None = None):
        self._restart = restart
        self._restart_on_change = (
            config.RESTART_ON_CONFIG_CHANGE if restart_on_change is None else restart_on_change
        )
        self.menu_options: dict[str, dict[str, Any]] = {}

    def set_menu_options(self, plugin_id: str, options: dict[str, Any]) -> None:
        self.menu_options[plugin_id] = dict(options)

        if self._restart_on_change:
            logger.info("Options of %s changed; restarting", plugin_id)
            self._restart()
