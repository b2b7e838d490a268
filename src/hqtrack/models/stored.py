"""Rows owned by the location store."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from hqtrack.models.reading import Position


class StoredReading(BaseModel):
    """A persisted location row.

    ``id`` is stable for the life of the row; updates only move
    ``obtained_at`` and ``battery``.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    device_id: str
    obtained_at: datetime
    position: Position
    speed: float = 0.0
    heading: int = 0
    battery: int | None = None


class Neighbor(BaseModel):
    """Result of a before/after lookup against a candidate position."""

    model_config = ConfigDict(frozen=True)

    id: int
    same_position: bool
