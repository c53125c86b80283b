"""Environment configuration for the plugin config host"""

import os
from pathlib import Path

from dotenv import load_dotenv

from .platform_utils import user_config_dir

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


class Config:
    """Host configuration read from the environment (and .env)"""

    APP_NAME = "plugin-config"

    # Paths
    CONFIG_DIR = Path(os.getenv("PLUGIN_CONFIG_DIR") or user_config_dir(APP_NAME))
    CONFIG_FILE = os.getenv("PLUGIN_CONFIG_FILE", "plugins.json")
    # Optional JSON default table ({plugin_id: {...}})
    DEFAULTS_FILE = os.getenv("PLUGIN_DEFAULTS_FILE", "")

    # Restart the host when a menu-driven option changes
    RESTART_ON_CONFIG_CHANGE = _env_bool("RESTART_ON_CONFIG_CHANGE")

    # Seconds a front-end caller waits on a projected call
    TRANSPORT_TIMEOUT = _env_float("TRANSPORT_TIMEOUT", 30.0)

    DEBUG = _env_bool("DEBUG")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()

    @classmethod
    def create_dirs(cls):
        cls.CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    def store_path(self) -> Path:
        return self.CONFIG_DIR / self.CONFIG_FILE


config = Config()
