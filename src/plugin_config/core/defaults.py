"""Read-only table of per-plugin default configurations."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from ..errors import InvalidArgumentError


class DefaultTable:
    """Immutable mapping of plugin id -> default config.

    Lookups hand out deep copies so no caller can alter the table.
    """

    def __init__(self, plugins: Mapping[str, Mapping[str, Any]] | None = None):
        self._plugins = MappingProxyType(
            {plugin_id: copy.deepcopy(dict(values)) for plugin_id, values in (plugins or {}).items()}
        )

    def get(self, plugin_id: str) -> dict[str, Any]:
        """Return the defaults of plugin_id, or {} when it declares none."""
        values = self._plugins.get(plugin_id)
        if values is None:
            return {}
        return copy.deepcopy(values)

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self._plugins

    def __iter__(self):
        return iter(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)

    @classmethod
    def from_json(cls, path: Path | str) -> "DefaultTable":
        """Load a table from a JSON file shaped as {plugin_id: {...}}."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise InvalidArgumentError(f"{path}: default table root is not an object")
        for plugin_id, values in data.items():
            if not isinstance(values, dict):
                raise InvalidArgumentError(f"{path}: defaults of {plugin_id!r} are not an object")
        return cls(data)
