"""Parsing of ``Key = Value, Key = Value`` sensor lines."""

from __future__ import annotations

import logging
from typing import Dict, Mapping

from models.metrics import SENTINEL, SPEC_BY_SENSOR_KEY, Metric

logger = logging.getLogger(__name__)


def parse_line(line: str) -> Dict[str, str]:
    """Split ``line`` into raw key/value pairs.

    Each comma separated segment is split on its first ``=`` and both sides are
    trimmed. Segments without ``=`` or with an empty key are skipped. When a key
    repeats, the last occurrence wins.
    """
    parsed: Dict[str, str] = {}
    for segment in line.split(","):
        key, separator, value = segment.partition("=")
        if not separator:
            if segment.strip():
                logger.debug("Skipping segment without '='", extra={"segment": segment.strip()})
            continue
        key = key.strip()
        if not key:
            logger.debug("Skipping segment with empty key", extra={"segment": segment.strip()})
            continue
        parsed[key] = value.strip()
    return parsed


def format_metrics(parsed: Mapping[str, str]) -> Dict[Metric, str]:
    """Map known sensor keys to display-ready cache values."""
    formatted: Dict[Metric, str] = {}
    for key, raw in parsed.items():
        spec = SPEC_BY_SENSOR_KEY.get(key)
        if spec is None:
            continue
        if not raw or raw == SENTINEL:
            logger.debug(
                "Ignoring missing value",
                extra={"metric": spec.metric.value, "segment": f"{key}={raw}"},
            )
            continue
        formatted[spec.metric] = spec.format(raw)
    return formatted


def parse_and_format(line: str) -> Dict[Metric, str]:
    return format_metrics(parse_line(line))
