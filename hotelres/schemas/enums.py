"""Status enums and the reservation state machine."""

from enum import Enum


class RoomStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"  # out of service / maintenance


class ReservationStatus(str, Enum):
    RESERVED = "RESERVED"
    CHECKED_IN = "CHECKED_IN"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Reservations in these states occupy their room
ACTIVE_STATUSES = frozenset({ReservationStatus.RESERVED, ReservationStatus.CHECKED_IN})

TERMINAL_STATUSES = frozenset({ReservationStatus.COMPLETED, ReservationStatus.CANCELLED})

ALLOWED_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.RESERVED: frozenset({ReservationStatus.CHECKED_IN, ReservationStatus.CANCELLED}),
    ReservationStatus.CHECKED_IN: frozenset({ReservationStatus.COMPLETED, ReservationStatus.CANCELLED}),
    ReservationStatus.COMPLETED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
}


def can_transition(current: ReservationStatus, target: ReservationStatus) -> bool:
    """Return True if a reservation may move from ``current`` to ``target``."""
    return target in ALLOWED_TRANSITIONS[current]
