"""Tests for the availability checker."""

from datetime import date

import pytest
import pytest_asyncio

from hotelres.exceptions import ValidationError
from hotelres.services.availability_service import nights_between, validate_stay_dates

pytestmark = pytest.mark.asyncio

JAN_1 = date(2024, 1, 1)
JAN_3 = date(2024, 1, 3)
JAN_5 = date(2024, 1, 5)
JAN_7 = date(2024, 1, 7)


@pytest_asyncio.fixture
async def booked(make_room, make_guest, reservations):
    """A room with one reservation over [Jan 1, Jan 5)."""
    room = await make_room()
    guest = await make_guest()
    reservation = await reservations.create_reservation(guest.id, room.id, JAN_1, JAN_5)
    return room, guest, reservation


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    """Night counting and date validation."""

    def test_nights_between(self):
        assert nights_between(date(2024, 3, 1), date(2024, 3, 4)) == 3
        assert nights_between(date(2024, 2, 28), date(2024, 3, 1)) == 2

    def test_missing_dates(self):
        with pytest.raises(ValidationError, match="required"):
            validate_stay_dates(None, JAN_5, JAN_1)

    def test_start_in_the_past(self):
        with pytest.raises(ValidationError, match="past"):
            validate_stay_dates(date(2023, 12, 31), JAN_5, JAN_1)

    def test_start_today_is_allowed(self):
        validate_stay_dates(JAN_1, JAN_3, JAN_1)

    @pytest.mark.parametrize("end", [JAN_1, date(2023, 12, 31)])
    def test_end_not_after_start(self, end):
        with pytest.raises(ValidationError, match="End date must be after start date"):
            validate_stay_dates(JAN_1, end, JAN_1)


# ---------------------------------------------------------------------------
# is_available
# ---------------------------------------------------------------------------


class TestIsAvailable:
    """Conflict detection for a single room."""

    async def test_empty_room_is_available(self, availability, make_room):
        room = await make_room()
        result = await availability.is_available(room.id, JAN_1, JAN_5)
        assert result.available is True
        assert result.conflicts == []

    async def test_overlap_is_reported(self, availability, booked):
        room, _, reservation = booked
        result = await availability.is_available(room.id, JAN_3, JAN_7)
        assert result.available is False
        assert [c.id for c in result.conflicts] == [reservation.id]

    async def test_enclosing_range_conflicts(self, availability, booked):
        room, _, _ = booked
        result = await availability.is_available(room.id, date(2023, 12, 30), date(2024, 1, 10))
        assert result.available is False

    async def test_touching_ranges_do_not_conflict(self, availability, booked):
        room, _, _ = booked
        after = await availability.is_available(room.id, JAN_5, JAN_7)
        before = await availability.is_available(room.id, date(2023, 12, 28), JAN_1)
        assert after.available is True
        assert before.available is True

    async def test_other_rooms_are_ignored(self, availability, booked, make_room):
        other = await make_room()
        result = await availability.is_available(other.id, JAN_1, JAN_5)
        assert result.available is True

    async def test_excluded_reservation_is_ignored(self, availability, booked):
        room, _, reservation = booked
        result = await availability.is_available(room.id, JAN_3, JAN_7, exclude_reservation_id=reservation.id)
        assert result.available is True

    async def test_cancelled_and_completed_do_not_block(self, availability, reservations, make_room, make_guest):
        room = await make_room()
        guest = await make_guest()
        cancelled = await reservations.create_reservation(guest.id, room.id, JAN_1, JAN_5)
        await reservations.cancel_reservation(cancelled.id)
        completed = await reservations.create_reservation(guest.id, room.id, JAN_1, JAN_5)
        await reservations.check_in(completed.id)
        await reservations.check_out(completed.id)

        result = await availability.is_available(room.id, JAN_1, JAN_5)
        assert result.available is True

    async def test_checked_in_blocks(self, availability, reservations, booked):
        room, _, reservation = booked
        await reservations.check_in(reservation.id)
        result = await availability.is_available(room.id, JAN_3, JAN_7)
        assert result.available is False

    @pytest.mark.parametrize("room_id", [None, 0, -3])
    async def test_invalid_room_id(self, availability, room_id):
        with pytest.raises(ValidationError, match="Room ID"):
            await availability.is_available(room_id, JAN_1, JAN_5)

    async def test_missing_dates(self, availability):
        with pytest.raises(ValidationError, match="required"):
            await availability.is_available(1, JAN_1, None)

    async def test_inverted_dates(self, availability):
        with pytest.raises(ValidationError, match="End date must be after start date"):
            await availability.is_available(1, JAN_5, JAN_1)


class TestFindConflicts:
    """Hotel-wide conflict queries."""

    async def test_all_rooms_ordered_by_start(self, availability, reservations, make_room, make_guest):
        guest = await make_guest()
        first = await make_room()
        second = await make_room()
        late = await reservations.create_reservation(guest.id, first.id, JAN_3, JAN_7)
        early = await reservations.create_reservation(guest.id, second.id, JAN_1, JAN_5)

        conflicts = await availability.find_conflicts(JAN_1, JAN_7)
        assert [c["id"] for c in conflicts] == [early.id, late.id]
