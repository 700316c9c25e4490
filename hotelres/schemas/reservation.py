"""Pydantic v2 schemas for reservations, availability and detail views."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from hotelres.schemas.enums import ReservationStatus
from hotelres.schemas.guest import Guest
from hotelres.schemas.room import Room

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ReservationCreate(BaseModel):
    """Schema for booking a room."""

    guest_id: int | None = None
    room_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    special_requests: str | None = None


class ReservationUpdate(BaseModel):
    """Schema for amending a reservation. All fields optional."""

    guest_id: int | None = None
    room_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: ReservationStatus | None = None
    special_requests: str | None = None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Reservation(BaseModel):
    """A stored reservation, optionally joined with its guest and room."""

    id: int
    guest_id: int
    room_id: int
    start_date: date
    end_date: date
    nights: int
    total_amount: Decimal
    special_requests: str | None = None
    status: ReservationStatus
    created_at: datetime
    updated_at: datetime

    guest: Guest | None = None
    room: Room | None = None

    model_config = ConfigDict(from_attributes=True)


class GuestDetail(Guest):
    """A guest together with their reservations, newest first."""

    reservations: list[Reservation] = []


class RoomDetail(Room):
    """A room together with its reservations, newest first."""

    reservations: list[Reservation] = []


class AvailabilityResult(BaseModel):
    """Outcome of an availability check over [start_date, end_date)."""

    room_id: int | None = None
    start_date: date
    end_date: date
    available: bool
    conflicts: list[Reservation] = []
