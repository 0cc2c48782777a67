from __future__ import annotations

from threading import Lock
from types import MappingProxyType
from typing import Dict, Mapping

from models.metrics import LIVENESS_METRIC, SENTINEL, Metric


class SensorCache:
    """Latest display-ready value per metric, shared by one writer and one reader.

    Every slot starts at ``SENTINEL``. A single lock guards the whole slot set;
    it is held only while values are assigned or copied.
    """

    def __init__(self) -> None:
        self._values: Dict[Metric, str] = {metric: SENTINEL for metric in Metric}
        self._lock = Lock()

    def update(self, metric: Metric, value: str) -> None:
        self.update_many({metric: value})

    def update_many(self, values: Mapping[Metric, str]) -> None:
        """Apply every field parsed from one line as a single atomic unit."""
        unknown = [metric for metric in values if metric not in self._values]
        if unknown:
            raise KeyError(f"Unknown metrics: {', '.join(map(str, unknown))}.")
        with self._lock:
            self._values.update(values)

    def snapshot(self) -> Mapping[Metric, str]:
        """Return a read-only copy of all slots taken at one instant."""
        with self._lock:
            copy = dict(self._values)
        return MappingProxyType(copy)

    def has_data(self, metric: Metric = LIVENESS_METRIC) -> bool:
        return self.snapshot()[metric] != SENTINEL
