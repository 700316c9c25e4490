"""Tests for guest endpoints."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


def _payload(**overrides) -> dict:
    data = {
        "first_name": "Alice",
        "last_name": "Walker",
        "email": "alice.walker@example.com",
        "phone": "+61412345678",
        "id_document": "PA1234567",
    }
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# POST /api/v1/guests
# ---------------------------------------------------------------------------


class TestCreateGuest:
    """Tests for registering guests."""

    async def test_create_success(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/guests", json=_payload(id_document_type="DNI"))
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Guest created successfully"
        data = body["data"]
        assert data["first_name"] == "Alice"
        assert data["email"] == "alice.walker@example.com"
        assert data["id_document_type"] == "DNI"
        assert "id" in data
        assert "created_at" in data

    async def test_create_without_email(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/guests", json=_payload(email=None))
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["email"] is None
        assert data["id_document_type"] == "Passport"

    async def test_create_missing_required(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/guests", json={"first_name": "Only"})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "First name, last name, phone, and ID document are required"

    async def test_create_invalid_email(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/guests", json=_payload(email="not-an-email"))
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid request"
        assert "email" in body["error"]

    async def test_create_duplicate(self, client: AsyncClient, test_guest: dict) -> None:
        response = await client.post("/api/v1/guests", json=_payload(id_document=test_guest["id_document"]))
        assert response.status_code == 400
        assert "already exists" in response.json()["message"]


# ---------------------------------------------------------------------------
# GET /api/v1/guests
# ---------------------------------------------------------------------------


class TestReadGuests:
    """Tests for listing, searching and fetching guests."""

    async def test_list(self, client: AsyncClient, test_guest: dict) -> None:
        response = await client.get("/api/v1/guests")
        assert response.status_code == 200
        ids = [g["id"] for g in response.json()["data"]]
        assert ids == [test_guest["id"]]

    async def test_search(self, client: AsyncClient, test_guest: dict) -> None:
        await client.post("/api/v1/guests", json=_payload())
        response = await client.get("/api/v1/guests/search", params={"query": "WALK"})
        assert response.status_code == 200
        names = [g["last_name"] for g in response.json()["data"]]
        assert names == ["Walker"]

    async def test_search_requires_query(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/guests/search")
        assert response.status_code == 400
        assert response.json()["message"] == "Search query is required"

    async def test_get_detail(self, client: AsyncClient, test_guest: dict) -> None:
        response = await client.get(f"/api/v1/guests/{test_guest['id']}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["email"] == test_guest["email"]
        assert data["reservations"] == []

    async def test_get_not_found(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/guests/9999")
        assert response.status_code == 404
        assert response.json() == {"success": False, "data": None, "message": "Guest not found", "error": None}

    async def test_get_bad_id(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/guests/abc")
        assert response.status_code == 400


# ---------------------------------------------------------------------------
# PUT / DELETE /api/v1/guests/{id}
# ---------------------------------------------------------------------------


class TestUpdateGuest:
    """Tests for partially updating guests."""

    async def test_update_partial(self, client: AsyncClient, test_guest: dict) -> None:
        response = await client.put(f"/api/v1/guests/{test_guest['id']}", json={"phone": "+61499999999"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["phone"] == "+61499999999"
        assert data["first_name"] == test_guest["first_name"]

    async def test_update_null_document_type(self, client: AsyncClient, test_guest: dict) -> None:
        response = await client.put(f"/api/v1/guests/{test_guest['id']}", json={"id_document_type": None})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "id_document_type cannot be empty"

        response = await client.get("/api/v1/guests")
        assert response.status_code == 200
        assert response.json()["data"][0]["id_document_type"] == "Passport"

    async def test_update_not_found(self, client: AsyncClient) -> None:
        response = await client.put("/api/v1/guests/9999", json={"phone": "1"})
        assert response.status_code == 404


class TestDeleteGuest:
    """Tests for deleting guests."""

    async def test_delete(self, client: AsyncClient, test_guest: dict) -> None:
        response = await client.delete(f"/api/v1/guests/{test_guest['id']}")
        assert response.status_code == 200
        assert response.json()["message"] == "Guest deleted successfully"

        response = await client.get(f"/api/v1/guests/{test_guest['id']}")
        assert response.status_code == 404

    async def test_delete_not_found(self, client: AsyncClient) -> None:
        response = await client.delete("/api/v1/guests/9999")
        assert response.status_code == 404
