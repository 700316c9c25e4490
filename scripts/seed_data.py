"""Seed the database with sample rooms, guests and reservations.

Everything goes through the services, so the seeded data obeys the same
rules as data entered through the API (unique names, no double bookings,
prices computed from the room rate).

Run against the configured database:
    python -m scripts.seed_data
"""

import asyncio
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import delete

from hotelres.database import dispose_engine, session_scope
from hotelres.models import Guest, Reservation, Room
from hotelres.services.guest_service import GuestService
from hotelres.services.reservation_service import ReservationService
from hotelres.services.room_service import RoomService
from hotelres.store.sql import SqlStore

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

ROOMS = [
    {
        "name": "Room 101",
        "description": "Ground-floor single next to the garden.",
        "price": Decimal("65.00"),
        "capacity": 1,
        "beds": 1,
        "air_conditioning": False,
    },
    {
        "name": "Room 102",
        "description": "Double room with a queen bed and street view.",
        "price": Decimal("95.00"),
        "capacity": 2,
        "beds": 1,
        "air_conditioning": True,
    },
    {
        "name": "Room 201",
        "description": "Twin room on the first floor, quiet side.",
        "price": Decimal("100.00"),
        "capacity": 2,
        "beds": 2,
        "air_conditioning": True,
    },
    {
        "name": "Family Suite",
        "description": "Two connected rooms with a sofa bed, sleeps four.",
        "price": Decimal("180.00"),
        "capacity": 4,
        "beds": 3,
        "air_conditioning": True,
    },
    {
        "name": "Attic Room",
        "description": "Loft room under renovation.",
        "price": Decimal("80.00"),
        "capacity": 2,
        "beds": 1,
        "air_conditioning": False,
        "status": "UNAVAILABLE",
    },
]

GUESTS = [
    {
        "first_name": "Lucia",
        "last_name": "Fernandez",
        "email": "lucia.fernandez@example.com",
        "phone": "+34600111222",
        "id_document": "X1234567",
        "id_document_type": "DNI",
    },
    {
        "first_name": "Tom",
        "last_name": "Becker",
        "email": "tom.becker@example.com",
        "phone": "+49151222333",
        "id_document": "C01X00T47",
    },
    {
        "first_name": "Aiko",
        "last_name": "Tanaka",
        "email": None,
        "phone": "+81901234567",
        "id_document": "TK9876543",
    },
]


def _build_reservations(rooms: list, guests: list, today: date) -> list[dict]:
    """Stays relative to today: one arriving today, the rest in the coming weeks."""
    return [
        {"room": rooms[1], "guest": guests[0], "start": today, "nights": 3, "check_in": True},
        {"room": rooms[2], "guest": guests[1], "start": today + timedelta(days=5), "nights": 4},
        {"room": rooms[2], "guest": guests[2], "start": today + timedelta(days=9), "nights": 2},
        {
            "room": rooms[3],
            "guest": guests[1],
            "start": today + timedelta(days=21),
            "nights": 7,
            "special_requests": "Baby cot, please",
        },
    ]


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    """Wipe existing rows and insert the sample data in one transaction."""
    async with session_scope() as session:
        await session.execute(delete(Reservation))
        await session.execute(delete(Guest))
        await session.execute(delete(Room))
        await session.flush()

        store = SqlStore(session)
        room_service = RoomService(store)
        guest_service = GuestService(store)
        reservation_service = ReservationService(store)

        rooms = [await room_service.create_room(**data) for data in ROOMS]
        for room in rooms:
            print(f"   🛏  {room.name} — ${room.price}/night ({room.status.value})")

        guests = [await guest_service.create_guest(**data) for data in GUESTS]
        print(f"✅ Created {len(guests)} guests")

        today = date.today()
        count = 0
        for data in _build_reservations(rooms, guests, today):
            reservation = await reservation_service.create_reservation(
                guest_id=data["guest"].id,
                room_id=data["room"].id,
                start_date=data["start"],
                end_date=data["start"] + timedelta(days=data["nights"]),
                special_requests=data.get("special_requests"),
            )
            if data.get("check_in"):
                await reservation_service.check_in(reservation.id)
            count += 1

        print(f"✅ Created {count} reservations")
        print()
        print("=" * 60)
        print("📊 Seed Summary")
        print("=" * 60)
        print(f"   Rooms:         {len(rooms)}")
        print(f"   Guests:        {len(guests)}")
        print(f"   Reservations:  {count}")
        print("=" * 60)

    await dispose_engine()


if __name__ == "__main__":
    asyncio.run(seed())
