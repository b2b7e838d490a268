"""SQL location store on SQLAlchemy's asyncio engine.

Rows live in a single ``locations`` table. Coordinates are stored as
double precision so that the equality test in SQL is exact against the
decoded values.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Double, Index, Integer, String, and_, delete, select, update
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from hqtrack._constants import DEFAULT_POOL_SIZE
from hqtrack.exceptions import HqStoreError
from hqtrack.models import Neighbor, Position, Reading

_logger = logging.getLogger(__name__)

#: Bare driver schemes mapped to their asyncio driver.
_ASYNC_DRIVERS: dict[str, str] = {
    "mysql": "mysql+aiomysql",
    "mariadb": "mariadb+aiomysql",
    "sqlite": "sqlite+aiosqlite",
}


class Base(DeclarativeBase):
    pass


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_id: Mapped[str] = mapped_column(String(64), nullable=False)
    obtained_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    lat: Mapped[float] = mapped_column(Double, nullable=False)
    lon: Mapped[float] = mapped_column(Double, nullable=False)
    speed: Mapped[float] = mapped_column(Double, nullable=False, default=0.0)
    direction: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    battery: Mapped[int | None] = mapped_column(Integer)

    __table_args__ = (Index("ix_locations_device_obtained", "device_id", "obtained_at"),)


def async_database_url(url: str) -> str:
    """Route bare ``mysql://``-style URLs to their asyncio driver."""
    scheme, sep, rest = url.partition("://")
    if not sep:
        return url
    return f"{_ASYNC_DRIVERS.get(scheme, scheme)}://{rest}"


class SqlLocationStore:
    """Location store backed by a pooled SQLAlchemy async engine.

    The engine's pool is the only resource shared between terminal
    connections; operations beyond its capacity wait inside the pool.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, url: str, *, pool_size: int = DEFAULT_POOL_SIZE) -> SqlLocationStore:
        database_url = async_database_url(url)
        engine_kwargs: dict[str, Any] = {"pool_pre_ping": True}
        if make_url(database_url).get_backend_name() != "sqlite":
            engine_kwargs.update(pool_size=pool_size, max_overflow=0)
        return cls(create_async_engine(database_url, **engine_kwargs))

    @contextlib.asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._sessions.begin() as session:
                yield session
        except (SQLAlchemyError, OSError) as exc:
            raise HqStoreError(f"{operation} failed: {exc}", operation=operation) from exc

    async def create_schema(self) -> None:
        """Create the ``locations`` table and its index when missing."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as exc:
            raise HqStoreError(f"create_schema failed: {exc}", operation="create_schema") from exc

    async def _neighbor(self, operation: str, *criteria: Any, order_by: Any, position: Position) -> Neighbor | None:
        same = and_(Location.lat == position.latitude, Location.lon == position.longitude)
        stmt = select(Location.id, same.label("same_position")).where(*criteria).order_by(*order_by).limit(1)
        async with self._transaction(operation) as session:
            row = (await session.execute(stmt)).first()
        if row is None:
            return None
        return Neighbor(id=row.id, same_position=bool(row.same_position))

    async def find_before(self, device_id: str, time: datetime, position: Position) -> Neighbor | None:
        return await self._neighbor(
            "find_before",
            Location.device_id == device_id,
            Location.obtained_at < time,
            order_by=(Location.obtained_at.desc(), Location.id.desc()),
            position=position,
        )

    async def find_after(self, device_id: str, time: datetime, position: Position) -> Neighbor | None:
        return await self._neighbor(
            "find_after",
            Location.device_id == device_id,
            Location.obtained_at > time,
            order_by=(Location.obtained_at.asc(), Location.id.asc()),
            position=position,
        )

    async def insert(self, reading: Reading) -> int:
        location = Location(
            device_id=reading.device_id,
            obtained_at=reading.timestamp,
            lat=reading.position.latitude,
            lon=reading.position.longitude,
            speed=reading.speed,
            direction=reading.heading,
            battery=reading.battery,
        )
        async with self._transaction("insert") as session:
            session.add(location)
            await session.flush()
            return location.id

    async def update(self, row_id: int, time: datetime, battery: int | None) -> None:
        stmt = update(Location).where(Location.id == row_id).values(obtained_at=time, battery=battery)
        async with self._transaction("update") as session:
            result = await session.execute(stmt)
        if result.rowcount == 0:
            raise HqStoreError(f"No location with id {row_id}", operation="update")

    async def delete(self, row_id: int) -> None:
        stmt = delete(Location).where(Location.id == row_id)
        async with self._transaction("delete") as session:
            result = await session.execute(stmt)
        if result.rowcount == 0:
            raise HqStoreError(f"No location with id {row_id}", operation="delete")

    async def close(self) -> None:
        _logger.debug("Disposing database engine")
        await self._engine.dispose()
