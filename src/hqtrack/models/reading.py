"""Decoded telemetry models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Position(BaseModel):
    """A WGS84 coordinate in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class Reading(BaseModel):
    """A single decoded ``V1`` position report.

    Parameters
    ----------
    device_id : str
        Terminal identifier as sent by the device.
    timestamp : datetime
        Naive device time; the protocol carries no time zone.
    position : Position
        Reported coordinate.
    speed : float
        Ground speed in km/h.
    heading : int
        Course over ground in degrees.
    battery : int or None
        Battery charge in percent, ``None`` when not reported sensibly.
    valid : bool
        The terminal's own assessment of its fix.
    """

    model_config = ConfigDict(frozen=True)

    device_id: str
    timestamp: datetime
    position: Position
    speed: float = Field(ge=0.0)
    heading: int = Field(ge=0, le=359)
    battery: int | None = Field(default=None, ge=0, le=100)
    valid: bool

    @field_validator("device_id")
    @classmethod
    def _require_device_id(cls, value: str) -> str:
        if not value:
            raise ValueError("device_id must be non-empty")
        return value

    @field_validator("timestamp")
    @classmethod
    def _require_naive(cls, value: datetime) -> datetime:
        if value.tzinfo is not None:
            raise ValueError("timestamp must be naive")
        return value


class UnknownPacket(BaseModel):
    """A frame that does not match the ``V1`` report grammar."""

    model_config = ConfigDict(frozen=True)

    text: str
