"""Rotation of cached metrics across the text display."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Protocol, Tuple

import httpx

from datastore.sensor_cache import SensorCache
from models.metrics import LIVENESS_METRIC, METRIC_SPECS, SENTINEL, Metric

logger = logging.getLogger(__name__)

DEFAULT_NO_DATA_SECONDS = 5


class Display(Protocol):
    def show(self, message: str, seconds: float) -> None:
        ...

    def clear(self) -> None:
        ...


@dataclass(frozen=True)
class RotationItem:
    metric: Metric
    enabled: bool
    label: str

    def message(self, value: str) -> str:
        return f"{self.label}: {value}"


def build_rotation(show_flags: Mapping[Metric, bool]) -> Tuple[RotationItem, ...]:
    """Rotation entries in fixed metric order; missing flags mean disabled."""
    return tuple(
        RotationItem(metric=spec.metric, enabled=bool(show_flags.get(spec.metric, False)), label=spec.label)
        for spec in METRIC_SPECS
    )


class DisplayScheduler:
    """Sole reader of the sensor cache.

    One cycle shows every enabled metric that has data, each for
    ``seconds_per_item``, then clears the display. The same value drives the
    display's own duration and the local sleep so the two stay in step.
    """

    def __init__(
        self,
        cache: SensorCache,
        display: Display,
        rotation: Tuple[RotationItem, ...],
        seconds_per_item: float,
        seconds_between_cycles: float,
        no_data_seconds: float = DEFAULT_NO_DATA_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.cache = cache
        self.display = display
        self.rotation = rotation
        self.seconds_per_item = seconds_per_item
        self.seconds_between_cycles = seconds_between_cycles
        self.no_data_seconds = no_data_seconds
        self._sleep = sleep
        self._thread: Optional[threading.Thread] = None

    def run_cycle(self) -> float:
        """Run one rotation and return the pause to take before the next one."""
        snapshot = self.cache.snapshot()

        for item in self.rotation:
            if not item.enabled:
                continue
            value = snapshot[item.metric]
            if value == SENTINEL:
                continue
            self._emit(item, value)
            self._sleep(self.seconds_per_item)

        self._clear()

        if snapshot[LIVENESS_METRIC] == SENTINEL:
            logger.info("No sensor data yet", extra={"sleep_seconds": self.no_data_seconds})
            return self.no_data_seconds
        return self.seconds_between_cycles

    def run(self, max_cycles: Optional[int] = None) -> None:
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            try:
                pause = self.run_cycle()
            except Exception:  # noqa: BLE001
                logger.exception("Display cycle failed", extra={"sleep_seconds": self.no_data_seconds})
                pause = self.no_data_seconds
            self._sleep(pause)
            cycles += 1

    def start(self) -> threading.Thread:
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        # Daemon: the process ends with the ingester and takes this loop with it.
        self._thread = threading.Thread(target=self.run, name="display-scheduler", daemon=True)
        self._thread.start()
        logger.info("Display scheduler started")
        return self._thread

    def _emit(self, item: RotationItem, value: str) -> None:
        message = item.message(value)
        try:
            self.display.show(message, self.seconds_per_item)
        except httpx.HTTPError as exc:
            logger.warning(
                "Display request failed: %s",
                exc,
                extra={"metric": item.metric.value},
            )

    def _clear(self) -> None:
        try:
            self.display.clear()
        except httpx.HTTPError as exc:
            logger.warning("Display clear failed: %s", exc)
