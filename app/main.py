from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from app.schemas import DisplayStyle, DurationUnit
from datastore.sensor_cache import SensorCache
from logging_config import configure_logging
from services.display_client import DisplayClient
from services.ingester import StreamIngester
from services.scheduler import DisplayScheduler, build_rotation
from services.transport import build_display_client, build_sensor_client
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class Bridge:
    """The two long-running loops and the cache they share."""

    settings: Settings
    cache: SensorCache
    ingester: StreamIngester
    scheduler: DisplayScheduler
    display: DisplayClient

    def close(self) -> None:
        self.ingester.client.close()
        self.display.close()


def build_display(settings: Settings) -> DisplayClient:
    style = DisplayStyle(
        text_color=settings.text_color,
        text_size=settings.text_size,
        scroll_direction=settings.scroll_direction,
        scroll_speed=settings.scroll_speed,
        duration_unit=DurationUnit(settings.duration_unit),
    )
    return DisplayClient(build_display_client(settings), style=style)


def create_bridge(settings: Optional[Settings] = None) -> Bridge:
    """Wire the cache, ingester and scheduler from settings.

    Raises ``settings.ConfigurationError`` before anything starts when a
    required value is missing.
    """
    configure_logging()
    settings = settings or get_settings()
    cache = SensorCache()
    display = build_display(settings)
    ingester = StreamIngester(cache=cache, client=build_sensor_client(settings), url=settings.sensor_url)
    scheduler = DisplayScheduler(
        cache=cache,
        display=display,
        rotation=build_rotation(settings.show_flags),
        seconds_per_item=settings.seconds_per_data,
        seconds_between_cycles=settings.seconds_between_cycles,
        no_data_seconds=settings.no_data_retry_seconds,
    )
    enabled = [item.metric.value for item in scheduler.rotation if item.enabled]
    logger.info("Bridge configured; rotating %s", ", ".join(enabled) or "no metrics")
    return Bridge(settings=settings, cache=cache, ingester=ingester, scheduler=scheduler, display=display)


def run_bridge(bridge: Bridge) -> None:
    """Start the scheduler thread and block on the sensor stream.

    Only returns by raising: ``SensorStreamError`` when the stream fails.
    """
    bridge.scheduler.start()
    try:
        bridge.ingester.run()
    finally:
        # The scheduler thread may still be mid-request; it ends with the process.
        bridge.ingester.client.close()
