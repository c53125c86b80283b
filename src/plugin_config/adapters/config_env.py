"""Env configuration adapter producing a structured HostConfig."""

from __future__ import annotations

from pathlib import Path

from ..config import config as env_config
from ..core.config_model import HostConfig


def load_host_config() -> HostConfig:
    return HostConfig(
        store_path=env_config.store_path(),
        defaults_path=Path(env_config.DEFAULTS_FILE) if env_config.DEFAULTS_FILE else None,
        restart_on_config_change=env_config.RESTART_ON_CONFIG_CHANGE,
        transport_timeout=env_config.TRANSPORT_TIMEOUT,
        debug=env_config.DEBUG,
        log_level=env_config.LOG_LEVEL,
    )
