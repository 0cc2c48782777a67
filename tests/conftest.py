from __future__ import annotations

from typing import Iterator

import pytest

from settings import SHOW_FLAG_ENV, get_settings

REQUIRED_ENV = {
    "SENSOR_IP": "192.0.2.10",
    "SENSOR_USER": "viewer",
    "SENSOR_PASSWORD": "sensor-secret",
    "TEXT_DISPLAY_IP": "192.0.2.20",
    "TEXT_DISPLAY_USER": "operator",
    "TEXT_DISPLAY_PASSWORD": "display-secret",
}

SHOW_ENV = {name: "yes" for name in SHOW_FLAG_ENV.values()}

OPTIONAL_ENV = (
    "TEXT_DISPLAY_SCHEME",
    "SECONDS_BETWEEN_CYCLES",
    "SECONDS_PER_DATA",
    "NO_DATA_RETRY_SECONDS",
    "SENSOR_CONNECT_TIMEOUT",
    "HTTP_AUTH_SCHEME",
    "VERIFY_TLS",
    "DISPLAY_TEXT_COLOR",
    "DISPLAY_TEXT_SIZE",
    "DISPLAY_SCROLL_DIRECTION",
    "DISPLAY_SCROLL_SPEED",
    "DISPLAY_DURATION_UNIT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch) -> Iterator[None]:
    for name in list(REQUIRED_ENV) + list(SHOW_ENV) + list(OPTIONAL_ENV):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def configured_env(monkeypatch) -> dict[str, str]:
    env = {**REQUIRED_ENV, **SHOW_ENV}
    for name, value in env.items():
        monkeypatch.setenv(name, value)
    return env
