"""Platform detection and per-user config directory resolution"""

import os
import sys
from pathlib import Path

# Platform detection
IS_WINDOWS = sys.platform == "win32"
IS_MACOS = sys.platform == "darwin"


def user_config_dir(app_name: str) -> Path:
    """Return the platform's per-user configuration directory for app_name."""
    if IS_WINDOWS:
        base = os.environ.get("APPDATA") or str(Path.home() / "AppData" / "Roaming")
        return Path(base) / app_name
    if IS_MACOS:
        return Path.home() / "Library" / "Application Support" / app_name

    # XDG on Linux and other unixes
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / app_name

