"""TCP accept loop for tracking terminals."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from hqtrack._constants import MEMORY_URL
from hqtrack.config import HqConfig
from hqtrack.exceptions import HqConfigError, HqTransportError
from hqtrack.session import ConnectionSession
from hqtrack.state.sql import SqlLocationStore
from hqtrack.state.store import InMemoryLocationStore, LocationStore

_logger = logging.getLogger(__name__)


async def open_store(config: HqConfig) -> LocationStore:
    """Build the store selected by ``config.database_url``."""
    if config.database_url == MEMORY_URL:
        _logger.warning("Using the in-memory store; locations are lost on exit")
        return InMemoryLocationStore()

    try:
        store = SqlLocationStore.from_url(config.database_url, pool_size=config.pool_size)
    except Exception as exc:
        raise HqConfigError(f"Unusable DATABASE_URL: {exc}") from exc
    if config.create_schema:
        await store.create_schema()
    return store


class TrackerServer:
    """Accepts terminal connections and runs one session task per connection.

    Usage::

        async with TrackerServer(config, store) as server:
            await server.serve_forever()
    """

    def __init__(self, config: HqConfig, store: LocationStore) -> None:
        self._config = config
        self._store = store
        self._server: asyncio.Server | None = None
        self._sessions: set[asyncio.Task[None]] = set()

    @property
    def port(self) -> int:
        """Bound port, useful when configured with port ``0``."""
        if self._server is None or not self._server.sockets:
            raise RuntimeError("Server is not started")
        return int(self._server.sockets[0].getsockname()[1])

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._accept, self._config.host, self._config.port)
        _logger.info("Listening on %s:%d", self._config.host, self.port)

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def close(self) -> None:
        server, self._server = self._server, None
        if server is not None:
            server.close()
        sessions = list(self._sessions)
        for task in sessions:
            task.cancel()
        if sessions:
            await asyncio.gather(*sessions, return_exceptions=True)
        if server is not None:
            await server.wait_closed()

    async def __aenter__(self) -> TrackerServer:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def _accept(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        task = asyncio.current_task()
        if task is not None:
            self._sessions.add(task)
        session = ConnectionSession(reader, writer, self._store, idle_timeout=self._config.idle_timeout)
        _logger.info("Accepted a connection: %s", session.peer)
        try:
            await session.run()
        except HqTransportError as exc:
            _logger.info("%s dropped, %s", session.peer, exc)
        except Exception:
            _logger.exception("Session with %s failed", session.peer)
        else:
            _logger.info("Connection with %s ended", session.peer)
        finally:
            if task is not None:
                self._sessions.discard(task)


async def run_server(config: HqConfig) -> None:
    """Open the store, serve until cancelled, then release everything."""
    store = await open_store(config)
    try:
        async with TrackerServer(config, store) as server:
            await server.serve_forever()
    finally:
        await store.close()
