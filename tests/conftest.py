import pytest

from plugin_config.backend_loop import BackendLoop
from plugin_config.core.registry import reset_registry


@pytest.fixture(autouse=True)
def _fresh_registry():
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def backend_loop():
    loop = BackendLoop()
    loop.start()
    yield loop
    loop.stop()
