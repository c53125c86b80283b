"""JSON file persistence backend for plugin configs."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from ..errors import PersistenceError

logger = logging.getLogger(__name__)


class JsonFilePersistence:
    """Keep every plugin's options in one JSON file.

    Layout: {"plugins": {plugin_id: {...}}}. Writes go through a temp file
    and os.replace so a crash never leaves a half-written store behind.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self, plugin_id: str) -> dict[str, Any] | None:
        options = self._read(plugin_id).get(plugin_id)
        if options is None:
            return None
        if not isinstance(options, dict):
            raise PersistenceError(plugin_id, f"stored options in {self.path} are not an object")
        return options

    def save(self, plugin_id: str, config: dict[str, Any]) -> None:
        plugins = self._read(plugin_id)
        plugins[plugin_id] = dict(config)

        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps({"plugins": plugins}, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(plugin_id, f"cannot write {self.path}: {exc}") from exc
        logger.debug("Saved %s to %s", plugin_id, self.path)

    def _read(self, plugin_id: str) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            raise PersistenceError(plugin_id, f"cannot read {self.path}: {exc}") from exc

        plugins = data.get("plugins") if isinstance(data, dict) else None
        if not isinstance(plugins, dict):
            raise PersistenceError(plugin_id, f"{self.path} has no plugins object")
        return plugins
