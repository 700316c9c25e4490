"""Typed errors raised by the reservation engine.

Services raise these and never catch them; the HTTP layer maps each class
onto a status code and a response envelope.
"""

from typing import Any


class ReservationSystemError(Exception):
    """Base class for every business-rule failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ReservationSystemError):
    """Input is missing, malformed, or out of order."""


class ConflictError(ReservationSystemError):
    """The requested stay overlaps active reservations for the same room."""

    def __init__(self, message: str, conflicts: list[Any]) -> None:
        super().__init__(message)
        self.conflicts = conflicts


class DuplicateError(ReservationSystemError):
    """A uniqueness constraint would be violated."""


class NotFoundError(ReservationSystemError):
    """A referenced guest, room, or reservation does not exist."""


class InvalidStateError(ReservationSystemError):
    """The operation is not allowed given the entity's current state."""
