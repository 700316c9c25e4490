"""SQLAlchemy models for the hotel reservations backend.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from hotelres.models.guest import Guest
from hotelres.models.reservation import Reservation
from hotelres.models.room import Room

__all__ = [
    "Guest",
    "Reservation",
    "Room",
]
