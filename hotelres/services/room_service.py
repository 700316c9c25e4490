"""Room catalog — room definitions, filters and availability queries."""

import logging
from collections.abc import Mapping
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from hotelres.exceptions import DuplicateError, InvalidStateError, NotFoundError, ValidationError
from hotelres.schemas.enums import RoomStatus
from hotelres.schemas.reservation import AvailabilityResult, RoomDetail
from hotelres.schemas.room import Room
from hotelres.services.availability_service import AvailabilityService, active
from hotelres.services.reservation_service import NEWEST_FIRST, join_reservations
from hotelres.store.base import DuplicateKeyError, Record, Store
from hotelres.store.query import Predicate, all_of, asc, eq, gte, lte, ne

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "description", "price", "capacity", "beds", "air_conditioning", "status"})
DUPLICATE_MESSAGE = "A room with this name already exists"


def _parse_price(value: Any) -> Decimal:
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid price value: '{value}'") from None
    if not price.is_finite() or price <= 0:
        raise ValidationError("Price must be a positive number")
    return price


def _parse_count(field: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field} must be a positive integer")
    return value


def _parse_room_status(value: Any) -> str:
    try:
        return RoomStatus(value).value
    except ValueError:
        allowed = ", ".join(s.value for s in RoomStatus)
        raise ValidationError(f"Invalid room status '{value}'. Must be one of: {allowed}") from None


def room_filters(
    min_capacity: int | None = None,
    min_beds: int | None = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
    air_conditioning: bool | None = None,
    status: RoomStatus | str | None = None,
) -> Predicate:
    """Build a predicate from the optional room thresholds."""
    return all_of(
        gte("capacity", min_capacity) if min_capacity is not None else None,
        gte("beds", min_beds) if min_beds is not None else None,
        gte("price", min_price) if min_price is not None else None,
        lte("price", max_price) if max_price is not None else None,
        eq("air_conditioning", air_conditioning) if air_conditioning is not None else None,
        eq("status", _parse_room_status(status)) if status is not None else None,
    )


class RoomService:
    """CRUD and search over the room collection."""

    def __init__(self, store: Store, availability: AvailabilityService | None = None) -> None:
        self._store = store
        self._availability = availability or AvailabilityService(store)

    async def _load(self, room_id: int) -> Record:
        record = await self._store.rooms.get(room_id)
        if record is None:
            raise NotFoundError("Room not found")
        return record

    async def _ensure_unique_name(self, name: str, room_id: int | None = None) -> None:
        clash = eq("name", name)
        if room_id is not None:
            clash = clash & ne("id", room_id)
        if await self._store.rooms.exists(clash):
            raise DuplicateError(DUPLICATE_MESSAGE)

    async def create_room(
        self,
        name: str | None,
        price: Any,
        capacity: int | None,
        beds: int | None,
        description: str | None = None,
        air_conditioning: bool = False,
        status: RoomStatus | str = RoomStatus.AVAILABLE,
    ) -> Room:
        """Add a room to the catalog. Name, price, capacity and beds are required."""
        if not name or price is None or capacity is None or beds is None:
            raise ValidationError("Name, price, capacity, and beds are required")
        data = {
            "name": name,
            "description": description,
            "price": _parse_price(price),
            "capacity": _parse_count("capacity", capacity),
            "beds": _parse_count("beds", beds),
            "air_conditioning": bool(air_conditioning),
            "status": _parse_room_status(status),
        }

        await self._ensure_unique_name(name)
        try:
            record = await self._store.rooms.create(data)
        except DuplicateKeyError as exc:
            raise DuplicateError(DUPLICATE_MESSAGE) from exc

        logger.info("Room %s created: %s", record["id"], name)
        return Room.model_validate(record)

    async def get_room(self, room_id: int) -> Room:
        return Room.model_validate(await self._load(room_id))

    async def get_room_detail(self, room_id: int) -> RoomDetail:
        """Return a room together with its reservation history."""
        record = await self._load(room_id)
        reservations = await self._store.reservations.find(eq("room_id", room_id), order_by=NEWEST_FIRST)
        return RoomDetail.model_validate(
            {**record, "reservations": await join_reservations(self._store, reservations)}
        )

    async def list_rooms(
        self,
        min_capacity: int | None = None,
        min_beds: int | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        air_conditioning: bool | None = None,
        status: RoomStatus | str | None = None,
    ) -> list[Room]:
        where = room_filters(min_capacity, min_beds, min_price, max_price, air_conditioning, status)
        records = await self._store.rooms.find(where, order_by=NEWEST_FIRST)
        return [Room.model_validate(r) for r in records]

    async def available_rooms(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        min_capacity: int | None = None,
        min_beds: int | None = None,
        max_price: Decimal | None = None,
        air_conditioning: bool | None = None,
    ) -> list[Room]:
        """Rooms in service that match the thresholds, cheapest first.

        When a date range is given, rooms with an active reservation
        overlapping it are left out.
        """
        if (start_date is None) != (end_date is None):
            raise ValidationError("Both start date and end date are required to filter by dates")
        if start_date is not None and end_date <= start_date:
            raise ValidationError("End date must be after start date")

        where = room_filters(
            min_capacity=min_capacity,
            min_beds=min_beds,
            max_price=max_price,
            air_conditioning=air_conditioning,
            status=RoomStatus.AVAILABLE,
        )
        rooms = await self._store.rooms.find(where, order_by=[asc("price"), asc("id")])

        if start_date is not None:
            free = []
            for room in rooms:
                result = await self._availability.is_available(room["id"], start_date, end_date)
                if result.available:
                    free.append(room)
            rooms = free
        return [Room.model_validate(r) for r in rooms]

    async def room_availability(self, room_id: int, start_date: date | None, end_date: date | None) -> AvailabilityResult:
        """Check one known room over [start_date, end_date)."""
        await self._load(room_id)
        return await self._availability.is_available(room_id, start_date, end_date)

    async def update_room(self, room_id: int, changes: Mapping[str, Any]) -> Room:
        """Partially update a room. Status may change regardless of bookings."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown room fields: {', '.join(sorted(unknown))}")

        update: dict[str, Any] = dict(changes)
        if "name" in update and not update["name"]:
            raise ValidationError("name cannot be empty")
        for field in ("price", "capacity", "beds", "air_conditioning", "status"):
            if field in update and update[field] is None:
                raise ValidationError(f"{field} cannot be empty")
        if "price" in update:
            update["price"] = _parse_price(update["price"])
        for field in ("capacity", "beds"):
            if field in update:
                update[field] = _parse_count(field, update[field])
        if "status" in update:
            update["status"] = _parse_room_status(update["status"])

        await self._load(room_id)
        if "name" in update:
            await self._ensure_unique_name(update["name"], room_id)
        try:
            record = await self._store.rooms.update(room_id, update)
        except DuplicateKeyError as exc:
            raise DuplicateError(DUPLICATE_MESSAGE) from exc
        if record is None:
            raise NotFoundError("Room not found")

        logger.info("Room %s updated: %s", room_id, sorted(update))
        return Room.model_validate(record)

    async def delete_room(self, room_id: int) -> None:
        """Delete a room and its past reservations.

        Refused while any reservation for the room is still reserved or
        checked in.
        """
        await self._load(room_id)
        reservations = self._store.reservations
        if await reservations.exists(eq("room_id", room_id) & active()):
            raise InvalidStateError("Cannot delete room with active reservations")

        for past in await reservations.find(eq("room_id", room_id)):
            await reservations.delete(past["id"])
        await self._store.rooms.delete(room_id)
        logger.info("Room %s deleted", room_id)
