"""Closed vocabulary of metrics reported by the air quality sensor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Tuple


SENTINEL = "N/A"


class Metric(str, Enum):
    """Metric identifiers in display rotation order."""

    temperature = "temperature"
    humidity = "humidity"
    co2 = "co2"
    nox = "nox"
    pm1_0 = "pm1_0"
    pm2_5 = "pm2_5"
    pm4_0 = "pm4_0"
    pm10_0 = "pm10_0"
    vaping = "vaping"
    voc = "voc"
    aqi = "aqi"


def _suffix(unit: str) -> Callable[[str], str]:
    def apply(raw: str) -> str:
        return f"{raw}{unit}"

    return apply


def _verbatim(raw: str) -> str:
    return raw


def _yes_no(raw: str) -> str:
    return "No" if raw == "0" else "Yes"


@dataclass(frozen=True, slots=True)
class MetricSpec:
    """How a raw sensor key maps to a cache slot and a display label."""

    metric: Metric
    sensor_key: str
    label: str
    formatter: Callable[[str], str]

    def format(self, raw: str) -> str:
        return self.formatter(raw)


_MICROGRAMS = " µg/m³"

METRIC_SPECS: Tuple[MetricSpec, ...] = (
    MetricSpec(Metric.temperature, "Temperature", "Temperature", _suffix("°C")),
    MetricSpec(Metric.humidity, "Humidity", "Humidity", _suffix("% RH")),
    MetricSpec(Metric.co2, "CO2", "CO2", _suffix(" ppm")),
    MetricSpec(Metric.nox, "NOx", "NOx", _verbatim),
    MetricSpec(Metric.pm1_0, "PM1.0", "PM1.0", _suffix(_MICROGRAMS)),
    MetricSpec(Metric.pm2_5, "PM2.5", "PM2.5", _suffix(_MICROGRAMS)),
    MetricSpec(Metric.pm4_0, "PM4.0", "PM4.0", _suffix(_MICROGRAMS)),
    MetricSpec(Metric.pm10_0, "PM10.0", "PM10.0", _suffix(_MICROGRAMS)),
    MetricSpec(Metric.vaping, "Vaping", "Vaping", _yes_no),
    MetricSpec(Metric.voc, "VOC", "VOC", _verbatim),
    MetricSpec(Metric.aqi, "AQI", "AQI", _verbatim),
)

SPEC_BY_METRIC: Dict[Metric, MetricSpec] = {spec.metric: spec for spec in METRIC_SPECS}
SPEC_BY_SENSOR_KEY: Dict[str, MetricSpec] = {spec.sensor_key: spec for spec in METRIC_SPECS}

# Temperature is present on every line the sensor emits; while it is still the
# sentinel nothing has been received yet.
LIVENESS_METRIC = Metric.temperature
