"""Core host configuration model (structured view)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class HostConfig:
    store_path: Path
    defaults_path: Path | None
    restart_on_config_change: bool
    transport_timeout: float
    debug: bool
    log_level: str
