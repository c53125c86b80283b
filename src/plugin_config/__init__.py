"""plugin-config - Reactive per-plugin configuration stores synced across a process boundary"""

__version__ = "1.0.0"
__description__ = "Reactive per-plugin configuration stores synced across a process boundary"

__all__ = ["main", "PluginConfig", "RemoteConfig", "__version__"]


def __getattr__(name: str):
    """Lazy import so importing the core stores does not pull in the host
    and its .env loading.
    """
    if name == "PluginConfig":
        from .core.store import PluginConfig

        return PluginConfig
    if name == "RemoteConfig":
        from .front import RemoteConfig

        return RemoteConfig
    if name == "main":
        from .main import main

        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
