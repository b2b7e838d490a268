"""Per-connection processing of terminal frames."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from hqtrack._constants import DEFAULT_IDLE_TIMEOUT
from hqtrack._transport import FrameReader
from hqtrack.exceptions import HqDecodeError, HqStoreError
from hqtrack.ingestion.packet import decode_packet
from hqtrack.models import UnknownPacket
from hqtrack.state.apply import merge_reading
from hqtrack.state.events import MergePlan
from hqtrack.state.store import LocationStore

_logger = logging.getLogger(__name__)


def format_peer(writer: asyncio.StreamWriter) -> str:
    peer = writer.get_extra_info("peername")
    if isinstance(peer, tuple) and len(peer) >= 2:
        return f"{peer[0]}:{peer[1]}"
    return str(peer) if peer else "unknown"


class ConnectionSession:
    """Reads, decodes and merges the frames of one terminal connection.

    Frames are handled strictly one after another. Decode and store
    failures are logged and skipped; transport failures end the session.

    Parameters
    ----------
    reader, writer
        The accepted connection.
    store
        Shared store handle. Its pool bounds store concurrency across
        all sessions.
    idle_timeout
        Seconds to wait for each complete frame.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        store: LocationStore,
        *,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
    ) -> None:
        self._writer = writer
        self._store = store
        self.peer = format_peer(writer)
        self._frames = FrameReader(reader, idle_timeout=idle_timeout, peer=self.peer)

    async def run(self) -> None:
        """Process frames until the peer disconnects.

        Raises
        ------
        HqTransportError
            On idle timeout or socket failure, after the connection is closed.
        """
        try:
            async for frame in self._frames:
                await self.handle_frame(frame)
        finally:
            await self._close()

    async def handle_frame(self, frame: str) -> MergePlan | None:
        """Decode one frame and merge it into the store.

        Returns the executed plan, or ``None`` when nothing was merged.
        """
        _logger.info("Message received from %s: %r", self.peer, frame)
        try:
            packet = decode_packet(frame)
        except HqDecodeError as exc:
            _logger.warning("Rejected message from %s: %s", self.peer, exc)
            return None

        if isinstance(packet, UnknownPacket):
            _logger.info("Skipping unknown packet from %s: %r", self.peer, packet.text)
            return None

        try:
            plan = await merge_reading(self._store, packet)
        except HqStoreError as exc:
            _logger.warning("Dropped reading for device=%s at %s: %s", packet.device_id, packet.timestamp, exc)
            return None
        _logger.debug("device=%s at %s -> %s", packet.device_id, packet.timestamp, plan.action)
        return plan

    async def _close(self) -> None:
        self._writer.close()
        with contextlib.suppress(OSError):
            await self._writer.wait_closed()
