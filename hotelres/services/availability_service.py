"""Availability checker — detects overlapping active reservations for a room.

All ranges are half-open: a stay over [start, end) occupies the nights from
``start`` up to but not including ``end``, so a checkout and a check-in on
the same day never conflict.
"""

import math
from datetime import date, timedelta

from hotelres.exceptions import ValidationError
from hotelres.schemas.enums import ACTIVE_STATUSES
from hotelres.schemas.reservation import AvailabilityResult, Reservation
from hotelres.store.base import Record, Store
from hotelres.store.query import Predicate, all_of, asc, eq, gt, in_, lt, ne

ONE_DAY = timedelta(days=1)


def overlapping(start_date: date, end_date: date) -> Predicate:
    """Reservations whose [start_date, end_date) intersects the given range."""
    return lt("start_date", end_date) & gt("end_date", start_date)


def active() -> Predicate:
    return in_("status", ACTIVE_STATUSES)


def nights_between(start_date: date, end_date: date) -> int:
    """Number of nights in a stay, rounding partial days up."""
    return math.ceil((end_date - start_date) / ONE_DAY)


def validate_stay_dates(start_date: date | None, end_date: date | None, today: date) -> None:
    """Reject missing dates, stays starting in the past, and empty or inverted ranges."""
    if start_date is None or end_date is None:
        raise ValidationError("Start date and end date are required")
    if start_date < today:
        raise ValidationError("Start date cannot be in the past")
    if end_date <= start_date:
        raise ValidationError("End date must be after start date")


class AvailabilityService:
    """Read-only conflict queries over the reservation collection."""

    def __init__(self, store: Store) -> None:
        self._store = store

    async def find_conflicts(
        self,
        start_date: date,
        end_date: date,
        room_id: int | None = None,
        exclude_reservation_id: int | None = None,
    ) -> list[Record]:
        """Return active reservations overlapping the range, optionally for one room only."""
        where = all_of(
            eq("room_id", room_id) if room_id is not None else None,
            active(),
            overlapping(start_date, end_date),
            ne("id", exclude_reservation_id) if exclude_reservation_id is not None else None,
        )
        return await self._store.reservations.find(where, order_by=[asc("start_date"), asc("id")])

    async def is_available(
        self,
        room_id: int,
        start_date: date,
        end_date: date,
        exclude_reservation_id: int | None = None,
    ) -> AvailabilityResult:
        """Check whether ``room_id`` is free over [start_date, end_date).

        ``exclude_reservation_id`` leaves one reservation out of the conflict
        set, which is how an existing booking is moved without clashing with
        itself.
        """
        if room_id is None or room_id < 1:
            raise ValidationError("Room ID must be a positive integer")
        if start_date is None or end_date is None:
            raise ValidationError("Start date and end date are required")
        if end_date <= start_date:
            raise ValidationError("End date must be after start date")

        conflicts = await self.find_conflicts(start_date, end_date, room_id, exclude_reservation_id)
        return AvailabilityResult(
            room_id=room_id,
            start_date=start_date,
            end_date=end_date,
            available=not conflicts,
            conflicts=[Reservation.model_validate(r) for r in conflicts],
        )
