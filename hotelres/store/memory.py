"""In-memory store implementation."""

import asyncio
import itertools
from collections.abc import AsyncIterator, Iterable, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from hotelres.store.base import Collection, DuplicateKeyError, Record, Store
from hotelres.store.query import Ordering, Predicate


class InMemoryCollection(Collection):
    """Dict-backed collection with auto-increment ids and unique fields."""

    def __init__(self, name: str, unique: Iterable[str] = ()) -> None:
        self.name = name
        self._unique = tuple(unique)
        self._storage: dict[int, Record] = {}
        self._ids = itertools.count(1)

    def _check_unique(self, record: Mapping[str, Any], record_id: int | None = None) -> None:
        for field in self._unique:
            value = record.get(field)
            if value is None:
                continue
            for other_id, other in self._storage.items():
                if other_id != record_id and other.get(field) == value:
                    raise DuplicateKeyError(self.name, field)

    async def get(self, record_id: int) -> Record | None:
        record = self._storage.get(record_id)
        return dict(record) if record is not None else None

    async def find(
        self,
        where: Predicate | None = None,
        order_by: Sequence[Ordering] = (),
    ) -> list[Record]:
        results = [dict(r) for r in self._storage.values() if where is None or where.matches(r)]
        # Stable sorts applied from the least significant key up
        for ordering in reversed(order_by):
            results.sort(key=lambda r: r[ordering.field], reverse=ordering.descending)
        return results

    async def create(self, data: Mapping[str, Any]) -> Record:
        self._check_unique(data)
        now = datetime.now(timezone.utc)
        record_id = next(self._ids)
        record = {**data, "id": record_id, "created_at": now, "updated_at": now}
        self._storage[record_id] = record
        return dict(record)

    async def update(self, record_id: int, changes: Mapping[str, Any]) -> Record | None:
        current = self._storage.get(record_id)
        if current is None:
            return None
        merged = {**current, **changes, "id": record_id}
        self._check_unique(merged, record_id)
        merged["updated_at"] = datetime.now(timezone.utc)
        self._storage[record_id] = merged
        return dict(merged)

    async def delete(self, record_id: int) -> bool:
        if record_id in self._storage:
            del self._storage[record_id]
            return True
        return False


class InMemoryStore(Store):
    """Process-local store used by tests and the ``memory`` storage backend."""

    def __init__(self) -> None:
        self.guests = InMemoryCollection("guests", unique=("email", "id_document"))
        self.rooms = InMemoryCollection("rooms", unique=("name",))
        self.reservations = InMemoryCollection("reservations")
        self._locks: dict[int, asyncio.Lock] = {}

    @asynccontextmanager
    async def booking_lock(self, room_id: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(room_id, asyncio.Lock())
        async with lock:
            yield
