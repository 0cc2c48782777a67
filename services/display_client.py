from __future__ import annotations

import logging
from typing import Optional

import httpx

from app.schemas import DisplayStyle, NotificationRequest, StopRequest

logger = logging.getLogger(__name__)

NOTIFICATION_PATH = "/config/rest/speaker-display-notification/v1/simple"
STOP_PATH = "/config/rest/speaker-display-notification/v1/stop"


class DisplayClient:
    """Minimal HTTP client for the speaker display notification API."""

    def __init__(self, client: httpx.Client, style: Optional[DisplayStyle] = None) -> None:
        self._client = client
        self.style = style or DisplayStyle()

    def close(self) -> None:
        self._client.close()

    def show(self, message: str, seconds: float) -> None:
        """Show ``message`` for ``seconds``. Raises ``httpx.HTTPError`` on failure."""
        payload = NotificationRequest.build(message, seconds, self.style)
        body = payload.model_dump(mode="json", by_alias=True)
        logger.debug("Sending notification", extra={"url": NOTIFICATION_PATH, "display_message": message})
        response = self._client.post(NOTIFICATION_PATH, json=body)
        response.raise_for_status()

    def clear(self) -> None:
        """Stop whatever notification is on screen."""
        response = self._client.post(STOP_PATH, json=StopRequest().model_dump(mode="json"))
        response.raise_for_status()
