from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict

from models.metrics import Metric


_SENSOR_IP_ENV = "SENSOR_IP"
_SENSOR_USER_ENV = "SENSOR_USER"
_SENSOR_PASSWORD_ENV = "SENSOR_PASSWORD"
_DISPLAY_IP_ENV = "TEXT_DISPLAY_IP"
_DISPLAY_USER_ENV = "TEXT_DISPLAY_USER"
_DISPLAY_PASSWORD_ENV = "TEXT_DISPLAY_PASSWORD"
_DISPLAY_SCHEME_ENV = "TEXT_DISPLAY_SCHEME"
_SECONDS_BETWEEN_CYCLES_ENV = "SECONDS_BETWEEN_CYCLES"
_SECONDS_PER_DATA_ENV = "SECONDS_PER_DATA"
_NO_DATA_RETRY_ENV = "NO_DATA_RETRY_SECONDS"
_CONNECT_TIMEOUT_ENV = "SENSOR_CONNECT_TIMEOUT"
_AUTH_SCHEME_ENV = "HTTP_AUTH_SCHEME"
_VERIFY_TLS_ENV = "VERIFY_TLS"
_TEXT_COLOR_ENV = "DISPLAY_TEXT_COLOR"
_TEXT_SIZE_ENV = "DISPLAY_TEXT_SIZE"
_SCROLL_DIRECTION_ENV = "DISPLAY_SCROLL_DIRECTION"
_SCROLL_SPEED_ENV = "DISPLAY_SCROLL_SPEED"
_DURATION_UNIT_ENV = "DISPLAY_DURATION_UNIT"
_LOG_LEVEL_ENV = "LOG_LEVEL"

# Names follow the parameter names of the deployed application.
SHOW_FLAG_ENV: Dict[Metric, str] = {
    Metric.temperature: "SHOW_TEMPERATURE",
    Metric.humidity: "SHOW_HUMIDITY",
    Metric.co2: "SHOW_CO2",
    Metric.nox: "SHOW_NOX",
    Metric.pm1_0: "SHOW_PM10",
    Metric.pm2_5: "SHOW_PM25",
    Metric.pm4_0: "SHOW_PM40",
    Metric.pm10_0: "SHOW_PM100",
    Metric.vaping: "SHOW_VAPING_SMOKING",
    Metric.voc: "SHOW_VOC",
    Metric.aqi: "SHOW_AQI",
}

_TRUTHY = {"yes", "true", "1", "on"}
_SHOW_ENABLED = "yes"
_AUTH_SCHEMES = {"basic", "digest"}
_DURATION_UNITS = {"seconds", "milliseconds"}


class ConfigurationError(ValueError):
    """Raised when a required setting is missing or unusable."""


@dataclass(frozen=True)
class Settings:
    sensor_ip: str
    sensor_user: str
    sensor_password: str
    display_ip: str
    display_user: str
    display_password: str
    display_scheme: str
    show_flags: Dict[Metric, bool]
    seconds_between_cycles: int
    seconds_per_data: int
    no_data_retry_seconds: int
    connect_timeout: float
    auth_scheme: str
    verify_tls: bool
    text_color: str
    text_size: str
    scroll_direction: str
    scroll_speed: int
    duration_unit: str
    log_level: str

    @property
    def sensor_url(self) -> str:
        return f"https://{self.sensor_ip}/axis-cgi/airquality/metadata.cgi"

    @property
    def display_base_url(self) -> str:
        return f"{self.display_scheme}://{self.display_ip}"

    def is_enabled(self, metric: Metric) -> bool:
        return self.show_flags.get(metric, False)


def _read_required_env(name: str) -> str:
    value = os.getenv(name)
    candidate = value.strip() if value is not None else ""
    if not candidate:
        raise ConfigurationError(f"Required setting {name} is not set.")
    return candidate


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_choice_env(name: str, default: str, choices: set[str]) -> str:
    candidate = _read_str_env(name, default).lower()
    if candidate not in choices:
        raise ConfigurationError(
            f"Setting {name}={candidate!r} must be one of {', '.join(sorted(choices))}."
        )
    return candidate


def _read_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if not candidate:
        return default
    return candidate in _TRUTHY


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_non_negative_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


def _read_show_flags() -> Dict[Metric, bool]:
    """Every flag must be present; only ``yes`` turns a metric on."""
    return {
        metric: _read_required_env(name).lower() == _SHOW_ENABLED
        for metric, name in SHOW_FLAG_ENV.items()
    }


def read_log_level() -> str:
    """Resolve the log level without requiring the rest of the settings."""
    return _read_log_level("INFO")


@lru_cache
def get_settings() -> Settings:
    return Settings(
        sensor_ip=_read_required_env(_SENSOR_IP_ENV),
        sensor_user=_read_required_env(_SENSOR_USER_ENV),
        sensor_password=_read_required_env(_SENSOR_PASSWORD_ENV),
        display_ip=_read_required_env(_DISPLAY_IP_ENV),
        display_user=_read_required_env(_DISPLAY_USER_ENV),
        display_password=_read_required_env(_DISPLAY_PASSWORD_ENV),
        display_scheme=_read_choice_env(_DISPLAY_SCHEME_ENV, "https", {"http", "https"}),
        show_flags=_read_show_flags(),
        seconds_between_cycles=_read_positive_int(_SECONDS_BETWEEN_CYCLES_ENV, 60),
        seconds_per_data=_read_positive_int(_SECONDS_PER_DATA_ENV, 5),
        no_data_retry_seconds=_read_positive_int(_NO_DATA_RETRY_ENV, 5),
        connect_timeout=_read_positive_float(_CONNECT_TIMEOUT_ENV, 5.0),
        auth_scheme=_read_choice_env(_AUTH_SCHEME_ENV, "digest", _AUTH_SCHEMES),
        verify_tls=_read_bool_env(_VERIFY_TLS_ENV, False),
        text_color=_read_str_env(_TEXT_COLOR_ENV, "#FFFFFF"),
        text_size=_read_str_env(_TEXT_SIZE_ENV, "medium"),
        scroll_direction=_read_str_env(_SCROLL_DIRECTION_ENV, "fromRightToLeft"),
        scroll_speed=_read_non_negative_int(_SCROLL_SPEED_ENV, 0),
        duration_unit=_read_choice_env(_DURATION_UNIT_ENV, "seconds", _DURATION_UNITS),
        log_level=_read_log_level("INFO"),
    )
