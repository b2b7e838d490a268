"""Frame reader over a long-lived terminal connection."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from hqtrack._constants import DEFAULT_IDLE_TIMEOUT, TERMINATOR
from hqtrack.exceptions import HqTransportError

_logger = logging.getLogger(__name__)


class FrameReader:
    """Splits a byte stream into ``#``-terminated text frames.

    Every frame read is bounded by ``idle_timeout``. Frames that are not
    valid UTF-8 are dropped without ending the connection.

    Usage::

        frames = FrameReader(reader, peer="10.0.0.5:40112")
        async for frame in frames:
            ...
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        *,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
        peer: str = "",
    ) -> None:
        self._reader = reader
        self._idle_timeout = idle_timeout
        self._peer = peer

    async def _read_raw(self) -> bytes | None:
        try:
            return await asyncio.wait_for(self._reader.readuntil(TERMINATOR), self._idle_timeout)
        except asyncio.IncompleteReadError as exc:
            if exc.partial:
                _logger.debug("Discarding %d trailing bytes from %s", len(exc.partial), self._peer)
            return None
        except TimeoutError as exc:
            raise HqTransportError(
                f"No complete frame within {self._idle_timeout:g}s",
                peer=self._peer,
            ) from exc
        except asyncio.LimitOverrunError as exc:
            raise HqTransportError(
                f"Frame exceeds buffer limit ({exc.consumed} bytes without terminator)",
                peer=self._peer,
            ) from exc
        except OSError as exc:
            raise HqTransportError(f"Read failed: {exc}", peer=self._peer) from exc

    async def read_frame(self) -> str | None:
        """Return the next frame including its terminator, or ``None`` at end of stream.

        Raises
        ------
        HqTransportError
            On idle timeout, oversized frames or socket errors.
        """
        while True:
            raw = await self._read_raw()
            if raw is None:
                return None
            try:
                return raw.decode("utf-8")
            except UnicodeDecodeError:
                _logger.debug("Skipping non-text frame from %s: %r", self._peer, raw[:64])

    def __aiter__(self) -> AsyncIterator[str]:
        return self._iter_frames()

    async def _iter_frames(self) -> AsyncIterator[str]:
        while (frame := await self.read_frame()) is not None:
            yield frame
