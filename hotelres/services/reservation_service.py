"""Reservation lifecycle — booking, amendment, cancellation and status moves."""

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from hotelres.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from hotelres.schemas.enums import ACTIVE_STATUSES, TERMINAL_STATUSES, ReservationStatus, can_transition
from hotelres.schemas.reservation import AvailabilityResult, Reservation
from hotelres.services.availability_service import (
    AvailabilityService,
    nights_between,
    validate_stay_dates,
)
from hotelres.store.base import Record, Store
from hotelres.store.query import all_of, any_of, contains, desc, eq, gte, in_, lte

logger = logging.getLogger(__name__)

AMENDABLE_FIELDS = frozenset({"guest_id", "room_id", "start_date", "end_date", "status", "special_requests"})

NEWEST_FIRST = (desc("created_at"), desc("id"))


def parse_status(value: Any) -> ReservationStatus:
    try:
        return ReservationStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ReservationStatus)
        raise ValidationError(f"Invalid status '{value}'. Must be one of: {allowed}") from None


async def join_reservations(store: Store, records: Iterable[Record]) -> list[Reservation]:
    """Attach guest and room snapshots to reservation records."""
    records = list(records)
    guest_ids = {r["guest_id"] for r in records}
    room_ids = {r["room_id"] for r in records}
    guests = {g["id"]: g for g in await store.guests.find(in_("id", guest_ids))} if guest_ids else {}
    rooms = {r["id"]: r for r in await store.rooms.find(in_("id", room_ids))} if room_ids else {}
    return [
        Reservation.model_validate({**r, "guest": guests.get(r["guest_id"]), "room": rooms.get(r["room_id"])})
        for r in records
    ]


class ReservationService:
    """Creates and maintains reservations over an injected store.

    ``clock`` returns the current calendar date; bookings may not start
    before it.
    """

    def __init__(
        self,
        store: Store,
        availability: AvailabilityService | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._availability = availability or AvailabilityService(store)
        self._clock = clock

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load(self, reservation_id: int) -> Record:
        record = await self._store.reservations.get(reservation_id)
        if record is None:
            raise NotFoundError("Reservation not found")
        return record

    async def _load_room(self, room_id: int) -> Record:
        room = await self._store.rooms.get(room_id)
        if room is None:
            raise NotFoundError("Room not found")
        return room

    async def _ensure_available(
        self,
        room_id: int,
        start_date: date,
        end_date: date,
        exclude_reservation_id: int | None = None,
    ) -> None:
        result = await self._availability.is_available(room_id, start_date, end_date, exclude_reservation_id)
        if not result.available:
            raise ConflictError("Room is not available for the selected dates", result.conflicts)

    async def _joined(self, record: Record) -> Reservation:
        (reservation,) = await join_reservations(self._store, [record])
        return reservation

    async def _transition(self, reservation_id: int, target: ReservationStatus) -> Reservation:
        room_id = (await self._load(reservation_id))["room_id"]
        async with self._store.booking_lock(room_id):
            record = await self._load(reservation_id)
            current = ReservationStatus(record["status"])
            if not can_transition(current, target):
                raise InvalidStateError(f"Cannot change reservation status from {current.value} to {target.value}")
            updated = await self._store.reservations.update(reservation_id, {"status": target.value})
        logger.info("Reservation %s moved %s -> %s", reservation_id, current.value, target.value)
        return await self._joined(updated)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_reservation(self, reservation_id: int) -> Reservation:
        return await self._joined(await self._load(reservation_id))

    async def list_reservations(
        self,
        status: ReservationStatus | str | None = None,
        guest_name: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[Reservation]:
        """List reservations, newest first.

        The date filter keeps reservations that fall entirely inside
        [start_date, end_date] or that span the whole of it.
        """
        if (start_date is None) != (end_date is None):
            raise ValidationError("Both start date and end date are required to filter by dates")

        guest_filter = None
        if guest_name:
            guests = await self._store.guests.find(
                any_of(contains("first_name", guest_name), contains("last_name", guest_name))
            )
            guest_filter = in_("guest_id", [g["id"] for g in guests])

        date_filter = None
        if start_date is not None and end_date is not None:
            date_filter = any_of(
                gte("start_date", start_date) & lte("end_date", end_date),
                lte("start_date", start_date) & gte("end_date", end_date),
            )

        where = all_of(
            eq("status", parse_status(status)) if status else None,
            guest_filter,
            date_filter,
        )
        records = await self._store.reservations.find(where, order_by=NEWEST_FIRST)
        return await join_reservations(self._store, records)

    async def check_availability(
        self,
        start_date: date | None,
        end_date: date | None,
        room_id: int | None = None,
    ) -> AvailabilityResult:
        """Report conflicts for a prospective stay.

        With a room, ``available`` says whether that room can be booked.
        Without one, every conflicting reservation in the hotel is listed
        and ``available`` is always True.
        """
        validate_stay_dates(start_date, end_date, self._clock())
        conflicts = await self._availability.find_conflicts(start_date, end_date, room_id)
        return AvailabilityResult(
            room_id=room_id,
            start_date=start_date,
            end_date=end_date,
            available=not conflicts if room_id is not None else True,
            conflicts=await join_reservations(self._store, conflicts),
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_reservation(
        self,
        guest_id: int | None,
        room_id: int | None,
        start_date: date | None,
        end_date: date | None,
        special_requests: str | None = None,
    ) -> Reservation:
        """Book ``room_id`` for ``guest_id`` over [start_date, end_date).

        Raises ``ValidationError`` for missing fields or bad dates,
        ``ConflictError`` when the room is taken, and ``NotFoundError`` when
        the room or guest does not exist.
        """
        if not guest_id or not room_id or start_date is None or end_date is None:
            raise ValidationError("Guest ID, room ID, start date, and end date are required")
        validate_stay_dates(start_date, end_date, self._clock())

        async with self._store.booking_lock(room_id):
            await self._ensure_available(room_id, start_date, end_date)
            room = await self._load_room(room_id)
            if await self._store.guests.get(guest_id) is None:
                raise NotFoundError("Guest not found")

            nights = nights_between(start_date, end_date)
            record = await self._store.reservations.create(
                {
                    "guest_id": guest_id,
                    "room_id": room_id,
                    "start_date": start_date,
                    "end_date": end_date,
                    "nights": nights,
                    "total_amount": Decimal(room["price"]) * nights,
                    "special_requests": special_requests,
                    "status": ReservationStatus.RESERVED.value,
                }
            )

        logger.info(
            "Reservation %s created: room %s, guest %s, %s -> %s",
            record["id"],
            room_id,
            guest_id,
            start_date,
            end_date,
        )
        return await self._joined(record)

    async def amend_reservation(self, reservation_id: int, changes: Mapping[str, Any]) -> Reservation:
        """Apply a partial update to a reservation.

        Supplying either date re-validates both effective dates; changing the
        dates or the room re-checks availability (ignoring this reservation)
        and reprices the stay at the room's current nightly rate. Status
        changes must follow the lifecycle transition table, and the dates or
        room of a completed or cancelled reservation cannot change.
        """
        unknown = set(changes) - AMENDABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown reservation fields: {', '.join(sorted(unknown))}")
        target = parse_status(changes["status"]) if changes.get("status") is not None else None

        lock_room_id = changes.get("room_id") or (await self._load(reservation_id))["room_id"]

        async with self._store.booking_lock(lock_room_id):
            # Re-read under the lock so the status and dates checked are current
            existing = await self._load(reservation_id)
            current = ReservationStatus(existing["status"])
            update: dict[str, Any] = {}

            if target is not None and target != current:
                if not can_transition(current, target):
                    raise InvalidStateError(
                        f"Cannot change reservation status from {current.value} to {target.value}"
                    )
                update["status"] = target.value

            room_id = changes.get("room_id") or existing["room_id"]
            start_date = changes.get("start_date") or existing["start_date"]
            end_date = changes.get("end_date") or existing["end_date"]
            dates_supplied = changes.get("start_date") is not None or changes.get("end_date") is not None
            room_changed = room_id != existing["room_id"]

            if (dates_supplied or room_changed) and current in TERMINAL_STATUSES:
                raise InvalidStateError(
                    f"Cannot change the dates or room of a {current.value.lower()} reservation"
                )
            if dates_supplied:
                validate_stay_dates(start_date, end_date, self._clock())

            guest_id = changes.get("guest_id")
            if guest_id is not None and guest_id != existing["guest_id"]:
                if await self._store.guests.get(guest_id) is None:
                    raise NotFoundError("Guest not found")
                update["guest_id"] = guest_id

            if "special_requests" in changes:
                update["special_requests"] = changes["special_requests"]

            if dates_supplied or room_changed:
                room = await self._load_room(room_id)
                if ReservationStatus(update.get("status", current)) in ACTIVE_STATUSES:
                    await self._ensure_available(
                        room_id, start_date, end_date, exclude_reservation_id=reservation_id
                    )
                nights = nights_between(start_date, end_date)
                update.update(
                    room_id=room_id,
                    start_date=start_date,
                    end_date=end_date,
                    nights=nights,
                    total_amount=Decimal(room["price"]) * nights,
                )
            record = await self._store.reservations.update(reservation_id, update) if update else existing

        if record is None:
            raise NotFoundError("Reservation not found")
        logger.info("Reservation %s updated: %s", reservation_id, sorted(update))
        return await self._joined(record)

    async def cancel_reservation(self, reservation_id: int) -> Reservation:
        """Cancel a reservation, keeping it on record with status CANCELLED."""
        record = await self._load(reservation_id)
        status = ReservationStatus(record["status"])
        if status is ReservationStatus.COMPLETED:
            raise InvalidStateError("Cannot cancel a completed reservation")
        if status is ReservationStatus.CANCELLED:
            raise InvalidStateError("Reservation is already cancelled")
        return await self._transition(reservation_id, ReservationStatus.CANCELLED)

    async def check_in(self, reservation_id: int) -> Reservation:
        return await self._transition(reservation_id, ReservationStatus.CHECKED_IN)

    async def check_out(self, reservation_id: int) -> Reservation:
        return await self._transition(reservation_id, ReservationStatus.COMPLETED)
