"""Shared test configuration and fixtures.

Every test gets a fresh in-memory store. Service tests run against a fixed
clock so that calendar dates in assertions stay readable; API tests go
through the FastAPI app with the store injected via dependency override and
use dates relative to the real today.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from hotelres.api.deps import get_store
from hotelres.main import app
from hotelres.schemas.guest import Guest
from hotelres.schemas.room import Room
from hotelres.services.availability_service import AvailabilityService
from hotelres.services.guest_service import GuestService
from hotelres.services.reservation_service import ReservationService
from hotelres.services.room_service import RoomService
from hotelres.store.memory import InMemoryStore

# "Today" as seen by service tests
TODAY = date(2023, 12, 1)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture
def availability(store: InMemoryStore) -> AvailabilityService:
    return AvailabilityService(store)


@pytest.fixture
def reservations(store: InMemoryStore, availability: AvailabilityService) -> ReservationService:
    return ReservationService(store, availability, clock=lambda: TODAY)


@pytest.fixture
def rooms(store: InMemoryStore, availability: AvailabilityService) -> RoomService:
    return RoomService(store, availability)


@pytest.fixture
def guests(store: InMemoryStore) -> GuestService:
    return GuestService(store)


@pytest.fixture
def make_room(rooms: RoomService) -> Callable[..., Awaitable[Room]]:
    """Factory creating rooms with sensible defaults; override any field."""
    counter = iter(range(1, 1000))

    async def _make(**overrides) -> Room:
        data = {
            "name": f"Room {next(counter)}",
            "price": Decimal("100.00"),
            "capacity": 2,
            "beds": 1,
        }
        data.update(overrides)
        return await rooms.create_room(**data)

    return _make


@pytest.fixture
def make_guest(guests: GuestService) -> Callable[..., Awaitable[Guest]]:
    """Factory creating guests with unique documents; override any field."""
    counter = iter(range(1, 1000))

    async def _make(**overrides) -> Guest:
        n = next(counter)
        data = {
            "first_name": f"Guest{n}",
            "last_name": "Tester",
            "email": f"guest{n}@example.com",
            "phone": f"+1555000{n:04d}",
            "id_document": f"DOC{n:06d}",
        }
        data.update(overrides)
        return await guests.create_guest(**data)

    return _make


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(store: InMemoryStore) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the test's in-memory store."""

    async def override_get_store() -> AsyncGenerator[InMemoryStore, None]:
        yield store

    app.dependency_overrides[get_store] = override_get_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_room(client: AsyncClient) -> dict:
    """Create and return a room via the API."""
    response = await client.post(
        "/api/v1/rooms",
        json={
            "name": "Test Room",
            "description": "A room for automated tests.",
            "price": "100.00",
            "capacity": 2,
            "beds": 1,
            "air_conditioning": True,
        },
    )
    assert response.status_code == 201, f"Failed to create test room: {response.text}"
    return response.json()["data"]


@pytest_asyncio.fixture
async def test_guest(client: AsyncClient) -> dict:
    """Create and return a guest via the API."""
    response = await client.post(
        "/api/v1/guests",
        json={
            "first_name": "Test",
            "last_name": "Guest",
            "email": "test.guest@example.com",
            "phone": "+61400000000",
            "id_document": "P0000001",
        },
    )
    assert response.status_code == 201, f"Failed to create test guest: {response.text}"
    return response.json()["data"]
