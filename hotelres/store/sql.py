"""SQLAlchemy-backed store implementation.

Each collection maps onto one ORM model and works inside the caller's
``AsyncSession``; committing is left to whoever owns the session.
"""

from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotelres.models.guest import Guest
from hotelres.models.reservation import Reservation
from hotelres.models.room import Room
from hotelres.store.base import Collection, DuplicateKeyError, Record, Store
from hotelres.store.query import Ordering, Predicate

UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    """Tell a unique-key failure apart from other integrity errors."""
    code = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if code is not None:
        return code == UNIQUE_VIOLATION
    # Drivers without SQLSTATE support (sqlite)
    return "UNIQUE constraint failed" in str(exc.orig)


def _to_record(obj: Any) -> Record:
    """Copy the column attributes of an ORM instance into a plain dict."""
    return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}


class SqlCollection(Collection):
    """Collection over one mapped model."""

    def __init__(self, session: AsyncSession, model: type, name: str) -> None:
        self._session = session
        self._model = model
        self.name = name

    async def _flush(self) -> None:
        # Savepoint so a constraint failure leaves the outer transaction usable
        try:
            async with self._session.begin_nested():
                await self._session.flush()
        except IntegrityError as exc:
            if _is_unique_violation(exc):
                raise DuplicateKeyError(self.name) from exc
            raise

    async def get(self, record_id: int) -> Record | None:
        obj = await self._session.get(self._model, record_id)
        return _to_record(obj) if obj is not None else None

    async def find(
        self,
        where: Predicate | None = None,
        order_by: Sequence[Ordering] = (),
    ) -> list[Record]:
        query = select(self._model)
        if where is not None:
            query = query.where(where.to_sql(self._model))
        for ordering in order_by:
            column = getattr(self._model, ordering.field)
            query = query.order_by(column.desc() if ordering.descending else column.asc())
        result = await self._session.execute(query)
        return [_to_record(obj) for obj in result.scalars().all()]

    async def create(self, data: Mapping[str, Any]) -> Record:
        obj = self._model(**data)
        self._session.add(obj)
        await self._flush()
        await self._session.refresh(obj)
        return _to_record(obj)

    async def update(self, record_id: int, changes: Mapping[str, Any]) -> Record | None:
        obj = await self._session.get(self._model, record_id)
        if obj is None:
            return None
        for field, value in changes.items():
            setattr(obj, field, value)
        await self._flush()
        await self._session.refresh(obj)
        return _to_record(obj)

    async def delete(self, record_id: int) -> bool:
        obj = await self._session.get(self._model, record_id)
        if obj is None:
            return False
        await self._session.delete(obj)
        await self._session.flush()
        return True


class SqlStore(Store):
    """Store bound to a single request-scoped session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.guests = SqlCollection(session, Guest, "guests")
        self.rooms = SqlCollection(session, Room, "rooms")
        self.reservations = SqlCollection(session, Reservation, "reservations")

    @asynccontextmanager
    async def booking_lock(self, room_id: int) -> AsyncIterator[None]:
        # Row lock on the room, released when the session's transaction ends
        await self._session.execute(select(Room.id).where(Room.id == room_id).with_for_update())
        yield
