from __future__ import annotations

import logging
import threading
from typing import List, Optional, Tuple

import httpx
import pytest

from datastore.sensor_cache import SensorCache
from models.metrics import Metric
from services.parser import parse_and_format
from services.scheduler import DisplayScheduler, RotationItem, build_rotation


class RecordingDisplay:
    def __init__(self, fail_on: Optional[str] = None, fail_clear: bool = False) -> None:
        self.calls: List[Tuple[str, ...]] = []
        self.fail_on = fail_on
        self.fail_clear = fail_clear

    def show(self, message: str, seconds: float) -> None:
        self.calls.append(("show", message, seconds))
        if self.fail_on and message.startswith(self.fail_on):
            raise httpx.ConnectError("display unreachable")

    def clear(self) -> None:
        self.calls.append(("clear",))
        if self.fail_clear:
            raise httpx.ReadTimeout("display timed out")


class RecordingSleep:
    def __init__(self, display: RecordingDisplay) -> None:
        self.display = display
        self.durations: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.durations.append(seconds)
        self.display.calls.append(("sleep", seconds))


def _scheduler(
    cache: SensorCache,
    display: RecordingDisplay,
    enabled: Tuple[Metric, ...],
) -> Tuple[DisplayScheduler, RecordingSleep]:
    sleep = RecordingSleep(display)
    scheduler = DisplayScheduler(
        cache=cache,
        display=display,
        rotation=build_rotation({metric: True for metric in enabled}),
        seconds_per_item=7,
        seconds_between_cycles=60,
        no_data_seconds=5,
        sleep=sleep,
    )
    return scheduler, sleep


def test_build_rotation_follows_metric_order() -> None:
    rotation = build_rotation({Metric.aqi: True, Metric.temperature: True})

    assert [item.metric for item in rotation] == list(Metric)
    assert [item.metric for item in rotation if item.enabled] == [Metric.temperature, Metric.aqi]
    assert rotation[0] == RotationItem(metric=Metric.temperature, enabled=True, label="Temperature")


def test_cycle_without_data_clears_and_selects_fallback() -> None:
    display = RecordingDisplay()
    scheduler, sleep = _scheduler(SensorCache(), display, tuple(Metric))

    pause = scheduler.run_cycle()

    assert pause == 5
    assert display.calls == [("clear",)]
    assert sleep.durations == []


def test_cycle_emits_enabled_metrics_in_order_then_clears() -> None:
    cache = SensorCache()
    cache.update_many(parse_and_format("CO2 = 604, Temperature = 22.8, Humidity = 37.0"))
    display = RecordingDisplay()
    scheduler, _ = _scheduler(cache, display, (Metric.temperature, Metric.co2))

    pause = scheduler.run_cycle()

    assert display.calls == [
        ("show", "Temperature: 22.8°C", 7),
        ("sleep", 7),
        ("show", "CO2: 604 ppm", 7),
        ("sleep", 7),
        ("clear",),
    ]
    assert pause == 60


def test_enabled_metric_without_data_is_skipped() -> None:
    cache = SensorCache()
    cache.update_many(parse_and_format("Temperature = 19.5"))
    display = RecordingDisplay()
    scheduler, _ = _scheduler(cache, display, (Metric.temperature, Metric.vaping))

    scheduler.run_cycle()

    assert display.calls == [("show", "Temperature: 19.5°C", 7), ("sleep", 7), ("clear",)]


def test_liveness_uses_temperature_only() -> None:
    cache = SensorCache()
    cache.update_many(parse_and_format("AQI = 3"))
    display = RecordingDisplay()
    scheduler, _ = _scheduler(cache, display, (Metric.aqi,))

    pause = scheduler.run_cycle()

    assert display.calls[0] == ("show", "AQI: 3", 7)
    assert pause == 5


def test_cycle_uses_one_snapshot() -> None:
    cache = SensorCache()
    cache.update_many(parse_and_format("Temperature = 20.0, Humidity = 40.0"))
    display = RecordingDisplay()
    scheduler, _ = _scheduler(cache, display, (Metric.temperature, Metric.humidity))

    def sleep_and_update(seconds: float) -> None:
        cache.update_many(parse_and_format("Temperature = 30.0, Humidity = 50.0"))

    scheduler._sleep = sleep_and_update  # type: ignore[attr-defined]
    scheduler.run_cycle()

    shown = [call[1] for call in display.calls if call[0] == "show"]
    assert shown == ["Temperature: 20.0°C", "Humidity: 40.0% RH"]


def test_display_failures_are_logged_and_rotation_continues(caplog) -> None:
    cache = SensorCache()
    cache.update_many(parse_and_format("Temperature = 22.8, CO2 = 604"))
    display = RecordingDisplay(fail_on="Temperature", fail_clear=True)
    scheduler, _ = _scheduler(cache, display, (Metric.temperature, Metric.co2))

    with caplog.at_level(logging.WARNING, logger="services.scheduler"):
        pause = scheduler.run_cycle()

    assert display.calls == [
        ("show", "Temperature: 22.8°C", 7),
        ("sleep", 7),
        ("show", "CO2: 604 ppm", 7),
        ("sleep", 7),
        ("clear",),
    ]
    assert pause == 60
    assert "Display request failed" in caplog.text
    assert "Display clear failed" in caplog.text


def test_run_sleeps_selected_pause_between_cycles() -> None:
    cache = SensorCache()
    display = RecordingDisplay()
    scheduler, sleep = _scheduler(cache, display, (Metric.temperature,))

    scheduler.run(max_cycles=1)
    cache.update_many(parse_and_format("Temperature = 22.8"))
    scheduler.run(max_cycles=1)

    assert sleep.durations == [5, 7, 60]


class FailOnceDisplay(RecordingDisplay):
    def __init__(self) -> None:
        super().__init__()
        self.failed = False

    def show(self, message: str, seconds: float) -> None:
        self.calls.append(("show", message, seconds))
        if not self.failed:
            self.failed = True
            raise ValueError("unexpected display bug")


def test_single_cycle_surfaces_non_http_errors() -> None:
    cache = SensorCache()
    cache.update_many(parse_and_format("Temperature = 22.8"))
    scheduler, _ = _scheduler(cache, FailOnceDisplay(), (Metric.temperature,))

    with pytest.raises(ValueError):
        scheduler.run_cycle()


def test_run_survives_unexpected_cycle_error(caplog) -> None:
    cache = SensorCache()
    cache.update_many(parse_and_format("Temperature = 22.8"))
    display = FailOnceDisplay()
    scheduler, sleep = _scheduler(cache, display, (Metric.temperature,))

    with caplog.at_level(logging.ERROR, logger="services.scheduler"):
        scheduler.run(max_cycles=2)

    shows = [call for call in display.calls if call[0] == "show"]
    assert len(shows) == 2
    assert sleep.durations == [5, 7, 60]
    assert "Display cycle failed" in caplog.text


def test_started_thread_stays_alive_after_unexpected_error() -> None:
    cache = SensorCache()
    cache.update_many(parse_and_format("Temperature = 22.8"))
    display = FailOnceDisplay()
    second_show = threading.Event()

    def sleep(seconds: float) -> None:
        if len([call for call in display.calls if call[0] == "show"]) >= 2:
            second_show.set()
            # Park the daemon thread once the second cycle is reached.
            threading.Event().wait()

    scheduler = DisplayScheduler(
        cache=cache,
        display=display,
        rotation=build_rotation({Metric.temperature: True}),
        seconds_per_item=7,
        seconds_between_cycles=60,
        sleep=sleep,
    )

    thread = scheduler.start()

    assert second_show.wait(timeout=5)
    assert thread.is_alive()


def test_start_runs_loop_in_daemon_thread() -> None:
    cache = SensorCache()
    display = RecordingDisplay()
    scheduler, _ = _scheduler(cache, display, (Metric.temperature,))
    scheduler.run = lambda max_cycles=None: None  # type: ignore[method-assign]

    thread = scheduler.start()
    thread.join(timeout=5)

    assert thread.daemon is True
    assert thread.name == "display-scheduler"
