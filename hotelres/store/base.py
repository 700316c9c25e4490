"""Persistence collaborator interfaces.

The reservation engine only talks to a ``Store``: three keyed collections
of plain record dicts plus a per-room lock around check-then-write booking
sequences. Implementations live in ``memory`` and ``sql``.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from contextlib import AbstractAsyncContextManager
from typing import Any

from hotelres.store.query import Ordering, Predicate

Record = dict[str, Any]


class DuplicateKeyError(Exception):
    """A write would break a unique constraint of the collection."""

    def __init__(self, collection: str, field: str | None = None) -> None:
        self.collection = collection
        self.field = field
        detail = f" on {field!r}" if field else ""
        super().__init__(f"Duplicate key in {collection}{detail}")


class Collection(ABC):
    """Keyed storage for one entity type."""

    name: str

    @abstractmethod
    async def get(self, record_id: int) -> Record | None:
        """Find record by ID"""
        pass

    @abstractmethod
    async def find(
        self,
        where: Predicate | None = None,
        order_by: Sequence[Ordering] = (),
    ) -> list[Record]:
        """Find all records matching ``where``"""
        pass

    @abstractmethod
    async def create(self, data: Mapping[str, Any]) -> Record:
        """Insert a record and return it with its assigned id and timestamps.

        Raises ``DuplicateKeyError`` when a unique field is already taken.
        """
        pass

    @abstractmethod
    async def update(self, record_id: int, changes: Mapping[str, Any]) -> Record | None:
        """Merge ``changes`` into a record; ``None`` if it does not exist.

        Raises ``DuplicateKeyError`` when a unique field is already taken.
        """
        pass

    @abstractmethod
    async def delete(self, record_id: int) -> bool:
        """Delete record, returning whether it existed"""
        pass

    async def exists(self, where: Predicate) -> bool:
        return bool(await self.find(where))


class Store(ABC):
    """The three collections the engine works with."""

    guests: Collection
    rooms: Collection
    reservations: Collection

    @abstractmethod
    def booking_lock(self, room_id: int) -> AbstractAsyncContextManager[None]:
        """Serialise availability checks and writes for one room.

        Everything done inside the context must behave as one atomic unit
        with respect to other bookings of the same room.
        """
