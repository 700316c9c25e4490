"""Tests for room endpoints."""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

START = date.today() + timedelta(days=30)
END = START + timedelta(days=3)


# ---------------------------------------------------------------------------
# POST /api/v1/rooms
# ---------------------------------------------------------------------------


class TestCreateRoom:
    """Tests for adding rooms."""

    async def test_create_success(self, client: AsyncClient, test_room: dict) -> None:
        assert test_room["name"] == "Test Room"
        assert test_room["price"] == "100.00"
        assert test_room["status"] == "AVAILABLE"
        assert test_room["air_conditioning"] is True

    async def test_create_missing_fields(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/rooms", json={"name": "Bare"})
        assert response.status_code == 400
        assert response.json()["message"] == "Name, price, capacity, and beds are required"

    async def test_create_duplicate_name(self, client: AsyncClient, test_room: dict) -> None:
        response = await client.post(
            "/api/v1/rooms", json={"name": "Test Room", "price": "90", "capacity": 1, "beds": 1}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "A room with this name already exists"

    async def test_create_negative_price(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/rooms", json={"name": "Cheap", "price": "-5", "capacity": 1, "beds": 1})
        assert response.status_code == 400

    async def test_create_unparseable_body(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/rooms", json={"name": "X", "price": "abc", "capacity": 1, "beds": 1})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request"


# ---------------------------------------------------------------------------
# GET /api/v1/rooms
# ---------------------------------------------------------------------------


class TestReadRooms:
    """Tests for listing and fetching rooms."""

    async def test_list_with_filters(self, client: AsyncClient, test_room: dict) -> None:
        await client.post("/api/v1/rooms", json={"name": "Suite", "price": "250", "capacity": 4, "beds": 2})

        response = await client.get("/api/v1/rooms", params={"min_capacity": 3})
        assert response.status_code == 200
        assert [r["name"] for r in response.json()["data"]] == ["Suite"]

        response = await client.get("/api/v1/rooms", params={"air_conditioning": "true"})
        assert [r["name"] for r in response.json()["data"]] == ["Test Room"]

    async def test_get_detail(self, client: AsyncClient, test_room: dict) -> None:
        response = await client.get(f"/api/v1/rooms/{test_room['id']}")
        assert response.status_code == 200
        assert response.json()["data"]["reservations"] == []

    async def test_get_not_found(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/rooms/9999")
        assert response.status_code == 404
        assert response.json()["message"] == "Room not found"


class TestAvailability:
    """Tests for the availability endpoints."""

    async def test_available_rooms(self, client: AsyncClient, test_room: dict, test_guest: dict) -> None:
        other = await client.post("/api/v1/rooms", json={"name": "Budget", "price": "60", "capacity": 1, "beds": 1})
        other_id = other.json()["data"]["id"]
        await client.post(
            "/api/v1/reservations",
            json={
                "guest_id": test_guest["id"],
                "room_id": test_room["id"],
                "start_date": START.isoformat(),
                "end_date": END.isoformat(),
            },
        )

        response = await client.get(
            "/api/v1/rooms/available",
            params={"start_date": START.isoformat(), "end_date": END.isoformat()},
        )
        assert response.status_code == 200
        assert [r["id"] for r in response.json()["data"]] == [other_id]

        response = await client.get("/api/v1/rooms/available")
        assert [r["id"] for r in response.json()["data"]] == [other_id, test_room["id"]]

    async def test_room_availability(self, client: AsyncClient, test_room: dict) -> None:
        response = await client.get(
            f"/api/v1/rooms/{test_room['id']}/availability",
            params={"start_date": START.isoformat(), "end_date": END.isoformat()},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["available"] is True
        assert data["conflicts"] == []

    async def test_room_availability_missing_dates(self, client: AsyncClient, test_room: dict) -> None:
        response = await client.get(f"/api/v1/rooms/{test_room['id']}/availability")
        assert response.status_code == 400


# ---------------------------------------------------------------------------
# PUT / DELETE /api/v1/rooms/{id}
# ---------------------------------------------------------------------------


class TestUpdateDeleteRoom:
    """Tests for updating and deleting rooms."""

    async def test_take_out_of_service(self, client: AsyncClient, test_room: dict) -> None:
        response = await client.put(f"/api/v1/rooms/{test_room['id']}", json={"status": "UNAVAILABLE"})
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "UNAVAILABLE"

        response = await client.get("/api/v1/rooms/available")
        assert response.json()["data"] == []

    async def test_delete_with_active_reservation(
        self, client: AsyncClient, test_room: dict, test_guest: dict
    ) -> None:
        await client.post(
            "/api/v1/reservations",
            json={
                "guest_id": test_guest["id"],
                "room_id": test_room["id"],
                "start_date": START.isoformat(),
                "end_date": END.isoformat(),
            },
        )
        response = await client.delete(f"/api/v1/rooms/{test_room['id']}")
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete room with active reservations"

    async def test_delete(self, client: AsyncClient, test_room: dict) -> None:
        response = await client.delete(f"/api/v1/rooms/{test_room['id']}")
        assert response.status_code == 200
        assert response.json()["success"] is True
