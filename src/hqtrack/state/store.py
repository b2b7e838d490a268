"""Location store interface and a deterministic in-memory implementation."""

from __future__ import annotations

import itertools
from datetime import datetime
from typing import Protocol

from hqtrack.exceptions import HqStoreError
from hqtrack.models import Neighbor, Position, Reading, StoredReading


class LocationStore(Protocol):
    """Structural store interface used by connection sessions.

    Implementations own the geometric-equality predicate behind
    :attr:`Neighbor.same_position`.
    """

    async def find_before(self, device_id: str, time: datetime, position: Position) -> Neighbor | None: ...

    async def find_after(self, device_id: str, time: datetime, position: Position) -> Neighbor | None: ...

    async def insert(self, reading: Reading) -> int: ...

    async def update(self, row_id: int, time: datetime, battery: int | None) -> None: ...

    async def delete(self, row_id: int) -> None: ...

    async def close(self) -> None: ...


class InMemoryLocationStore:
    """Dict-backed store with exact coordinate equality.

    Deterministic: the same sequence of operations always produces the
    same rows and ids.
    """

    def __init__(self) -> None:
        self._rows: dict[int, StoredReading] = {}
        self._ids = itertools.count(1)

    def _device_rows(self, device_id: str) -> list[StoredReading]:
        return [row for row in self._rows.values() if row.device_id == device_id]

    def _require(self, row_id: int, operation: str) -> StoredReading:
        row = self._rows.get(row_id)
        if row is None:
            raise HqStoreError(f"No location with id {row_id}", operation=operation)
        return row

    async def find_before(self, device_id: str, time: datetime, position: Position) -> Neighbor | None:
        earlier = [row for row in self._device_rows(device_id) if row.obtained_at < time]
        if not earlier:
            return None
        row = max(earlier, key=lambda r: (r.obtained_at, r.id))
        return Neighbor(id=row.id, same_position=row.position == position)

    async def find_after(self, device_id: str, time: datetime, position: Position) -> Neighbor | None:
        later = [row for row in self._device_rows(device_id) if row.obtained_at > time]
        if not later:
            return None
        row = min(later, key=lambda r: (r.obtained_at, r.id))
        return Neighbor(id=row.id, same_position=row.position == position)

    async def insert(self, reading: Reading) -> int:
        row_id = next(self._ids)
        self._rows[row_id] = StoredReading(
            id=row_id,
            device_id=reading.device_id,
            obtained_at=reading.timestamp,
            position=reading.position,
            speed=reading.speed,
            heading=reading.heading,
            battery=reading.battery,
        )
        return row_id

    async def update(self, row_id: int, time: datetime, battery: int | None) -> None:
        row = self._require(row_id, "update")
        self._rows[row_id] = row.model_copy(update={"obtained_at": time, "battery": battery})

    async def delete(self, row_id: int) -> None:
        self._require(row_id, "delete")
        del self._rows[row_id]

    async def close(self) -> None:
        return None

    def rows(self, device_id: str | None = None) -> list[StoredReading]:
        """Snapshot of stored rows ordered by time, optionally for one device."""
        rows = self._device_rows(device_id) if device_id is not None else list(self._rows.values())
        return sorted(rows, key=lambda r: (r.obtained_at, r.id))
