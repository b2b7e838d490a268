"""Typed models for decoded reports and stored rows."""

from hqtrack.models.reading import Position, Reading, UnknownPacket
from hqtrack.models.stored import Neighbor, StoredReading

Packet = Reading | UnknownPacket

__all__ = [
    "Neighbor",
    "Packet",
    "Position",
    "Reading",
    "StoredReading",
    "UnknownPacket",
]
