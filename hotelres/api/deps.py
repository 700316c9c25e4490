"""Shared API dependencies — single import point for all routers.

Routers get their services from here; the services get a ``Store`` built
for the configured storage backend::

    from hotelres.api.deps import get_reservation_service
"""

from collections.abc import AsyncIterator

from fastapi import Depends, Request

from hotelres.config import settings
from hotelres.database import session_scope
from hotelres.services.availability_service import AvailabilityService
from hotelres.services.guest_service import GuestService
from hotelres.services.reservation_service import ReservationService
from hotelres.services.room_service import RoomService
from hotelres.store.base import Store
from hotelres.store.sql import SqlStore


async def get_store(request: Request) -> AsyncIterator[Store]:
    """Yield the store for this request.

    With the SQL backend every request gets its own session and transaction,
    so row locks taken while checking availability are held until the
    reservation write is committed. The memory backend shares one store held
    on the application state.
    """
    if settings.storage_backend == "memory":
        yield request.app.state.memory_store
        return
    async with session_scope() as session:
        yield SqlStore(session)


def get_guest_service(store: Store = Depends(get_store)) -> GuestService:
    return GuestService(store)


def get_room_service(store: Store = Depends(get_store)) -> RoomService:
    return RoomService(store, AvailabilityService(store))


def get_reservation_service(store: Store = Depends(get_store)) -> ReservationService:
    return ReservationService(store, AvailabilityService(store), clock=settings.today)


__all__ = [
    "get_store",
    "get_guest_service",
    "get_room_service",
    "get_reservation_service",
]
