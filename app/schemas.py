"""Pydantic schemas for the speaker display notification REST API."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

MAX_MESSAGE_LENGTH = 127


class DurationUnit(str, Enum):
    """Unit the display expects for ``duration.value``."""

    seconds = "seconds"
    milliseconds = "milliseconds"


class DisplayDuration(BaseModel):
    """How long the display keeps a notification on screen."""

    type: Literal["time"] = "time"
    value: int = Field(..., ge=0)

    @classmethod
    def from_seconds(cls, seconds: float, unit: DurationUnit = DurationUnit.seconds) -> "DisplayDuration":
        if unit is DurationUnit.milliseconds:
            return cls(value=int(round(seconds * 1000)))
        return cls(value=int(round(seconds)))


class DisplayStyle(BaseModel):
    """Presentation settings shared by every notification."""

    model_config = ConfigDict(frozen=True)

    text_color: str = "#FFFFFF"
    text_size: str = "medium"
    scroll_direction: str = "fromRightToLeft"
    scroll_speed: int = Field(default=0, ge=0)
    duration_unit: DurationUnit = DurationUnit.seconds


class NotificationData(BaseModel):
    """Body of a ``simple`` notification request."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., max_length=MAX_MESSAGE_LENGTH)
    text_color: str = Field(..., alias="textColor")
    text_size: str = Field(..., alias="textSize")
    scroll_direction: str = Field(..., alias="scrollDirection")
    scroll_speed: int = Field(..., alias="scrollSpeed", ge=0)
    duration: DisplayDuration


class NotificationRequest(BaseModel):
    data: NotificationData

    @classmethod
    def build(cls, message: str, seconds: float, style: Optional[DisplayStyle] = None) -> "NotificationRequest":
        style = style or DisplayStyle()
        return cls(
            data=NotificationData(
                message=message[:MAX_MESSAGE_LENGTH],
                text_color=style.text_color,
                text_size=style.text_size,
                scroll_direction=style.scroll_direction,
                scroll_speed=style.scroll_speed,
                duration=DisplayDuration.from_seconds(seconds, style.duration_unit),
            )
        )


class StopRequest(BaseModel):
    data: dict = Field(default_factory=dict)
