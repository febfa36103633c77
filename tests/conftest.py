import pytest

from gatewayhttp.config.settings import get_settings

_ENV_VARS = (
    "GATEWAYHTTP_CONFIG_PATH",
    "GATEWAYHTTP_ENV_FILE",
    "GATEWAYHTTP_LOG_LEVEL",
    "GATEWAYHTTP_HTTP_TIMEOUT_SECONDS",
    "GATEWAYHTTP_INTERNAL_SERVER",
    "GATEWAYHTTP_SERVICE_HANDSHAKE",
)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    # Settings are lru_cached; each test starts from packaged defaults.
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
