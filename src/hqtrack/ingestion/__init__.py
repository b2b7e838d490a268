"""Ingestion layer.

Turns raw terminal frames into typed readings.
"""

from hqtrack.ingestion.packet import decode_packet

__all__ = ["decode_packet"]
