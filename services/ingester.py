"""Streaming ingestion of sensor metric lines into the shared cache."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from datastore.sensor_cache import SensorCache
from services.line_buffer import LineBuffer
from services.parser import parse_and_format

logger = logging.getLogger(__name__)


class SensorStreamError(RuntimeError):
    """The sensor stream could not be opened or stopped delivering data."""


class StreamIngester:
    """Sole writer of the sensor cache.

    ``run`` holds one long-lived GET against the sensor and never returns
    normally: reconnecting is left to whoever restarts the process.
    """

    def __init__(
        self,
        cache: SensorCache,
        client: httpx.Client,
        url: str,
        buffer: Optional[LineBuffer] = None,
    ) -> None:
        self.cache = cache
        self.client = client
        self.url = url
        self.buffer = buffer or LineBuffer()
        self.lines_applied = 0

    def feed(self, chunk: bytes) -> int:
        """Consume one network chunk; return how many lines updated the cache."""
        applied = 0
        for line in self.buffer.feed(chunk):
            if self.apply_line(line):
                applied += 1
        return applied

    def apply_line(self, line: str) -> bool:
        values = parse_and_format(line)
        if not values:
            logger.debug("Line produced no metrics", extra={"line_bytes": len(line)})
            return False
        self.cache.update_many(values)
        self.lines_applied += 1
        if logger.isEnabledFor(logging.DEBUG):
            snapshot = self.cache.snapshot()
            logger.debug(
                "Cache updated: %s",
                ", ".join(f"{metric.value}={value!r}" for metric, value in snapshot.items()),
            )
        return True

    def run(self) -> None:
        logger.info("Connecting to sensor stream", extra={"url": self.url})
        try:
            with self.client.stream("GET", self.url) as response:
                logger.info(
                    "Sensor stream opened",
                    extra={"url": self.url, "status_code": response.status_code},
                )
                response.raise_for_status()
                for chunk in response.iter_bytes():
                    self.feed(chunk)
                status_code = response.status_code
        except httpx.HTTPStatusError as exc:
            raise SensorStreamError(
                f"Sensor rejected stream request with status {exc.response.status_code}."
            ) from exc
        except httpx.HTTPError as exc:
            raise SensorStreamError(f"Sensor stream failed: {exc}") from exc

        raise SensorStreamError(
            f"Sensor stream closed by peer (status {status_code}, "
            f"{self.lines_applied} lines applied)."
        )
