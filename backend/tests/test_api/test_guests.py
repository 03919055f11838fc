"""Tests for guest CRUD endpoints."""

import uuid
from datetime import date

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _unique_email() -> str:
    return f"guest-{uuid.uuid4().hex[:8]}@test.com"


async def _create_guest(client: AsyncClient, headers: dict, **overrides) -> dict:
    payload = {"name": "Guest", "email": _unique_email(), "phone": "+6100000000"}
    payload.update(overrides)
    response = await client.post("/api/v1/guests", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# POST /api/v1/guests
# ---------------------------------------------------------------------------


class TestCreateGuest:
    """Tests for creating guests."""

    async def test_create_success(self, client: AsyncClient, auth_headers: dict) -> None:
        email = _unique_email()
        response = await client.post(
            "/api/v1/guests",
            json={
                "name": "Alice Walker",
                "email": email,
                "phone": "+61412345678",
                "notes": "Prefers quiet room",
            },
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Alice Walker"
        assert data["email"] == email
        assert data["phone"] == "+61412345678"
        assert data["notes"] == "Prefers quiet room"
        assert "id" in data
        assert "created_at" in data
        assert "updated_at" in data

    async def test_create_without_notes(self, client: AsyncClient, auth_headers: dict) -> None:
        data = await _create_guest(client, auth_headers, name="Minimal Guest")
        assert data["name"] == "Minimal Guest"
        assert data["notes"] is None

    async def test_create_missing_phone(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.post(
            "/api/v1/guests",
            json={"name": "No Phone", "email": _unique_email()},
            headers=auth_headers,
        )
        assert response.status_code == 422

    async def test_create_duplicate_email(self, client: AsyncClient, auth_headers: dict) -> None:
        email = _unique_email()
        await _create_guest(client, auth_headers, name="First Guest", email=email)

        response = await client.post(
            "/api/v1/guests",
            json={"name": "Second Guest", "email": email, "phone": "123"},
            headers=auth_headers,
        )
        assert response.status_code == 409
        assert "already exists" in response.json()["detail"].lower()

    async def test_same_email_allowed_for_different_owners(
        self, client: AsyncClient, auth_headers: dict, other_auth_headers: dict
    ) -> None:
        email = _unique_email()
        await _create_guest(client, auth_headers, email=email)
        await _create_guest(client, other_auth_headers, email=email)

    async def test_create_invalid_email(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.post(
            "/api/v1/guests",
            json={"name": "Bad", "email": "not-an-email", "phone": "123"},
            headers=auth_headers,
        )
        assert response.status_code == 422

    async def test_create_empty_name(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.post(
            "/api/v1/guests",
            json={"name": "", "email": _unique_email(), "phone": "123"},
            headers=auth_headers,
        )
        assert response.status_code == 422

    async def test_create_unauthenticated(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/guests",
            json={"name": "Anon", "email": _unique_email(), "phone": "123"},
        )
        assert response.status_code in (401, 403)


# ---------------------------------------------------------------------------
# GET /api/v1/guests
# ---------------------------------------------------------------------------


class TestListGuests:
    """Tests for listing and searching guests."""

    async def test_list_sorted_by_name(self, client: AsyncClient, auth_headers: dict) -> None:
        await _create_guest(client, auth_headers, name="Zoe")
        await _create_guest(client, auth_headers, name="Adam")
        await _create_guest(client, auth_headers, name="Mia")

        response = await client.get("/api/v1/guests", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert [g["name"] for g in data["items"]] == ["Adam", "Mia", "Zoe"]

    async def test_list_empty(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.get("/api/v1/guests", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0}

    async def test_search_by_name(self, client: AsyncClient, auth_headers: dict) -> None:
        await _create_guest(client, auth_headers, name="Charlie Searchable")
        await _create_guest(client, auth_headers, name="Someone Else")

        response = await client.get("/api/v1/guests", params={"search": "searchABLE"}, headers=auth_headers)
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "Charlie Searchable"

    async def test_search_by_email_phone_and_notes(self, client: AsyncClient, auth_headers: dict) -> None:
        await _create_guest(client, auth_headers, name="By Email", email="unique-findme@test.com")
        await _create_guest(client, auth_headers, name="By Phone", phone="+44 7700 900123")
        await _create_guest(client, auth_headers, name="By Notes", notes="Allergic to feathers")

        for term, expected in (("findme", "By Email"), ("7700", "By Phone"), ("feathers", "By Notes")):
            response = await client.get("/api/v1/guests", params={"search": term}, headers=auth_headers)
            names = [g["name"] for g in response.json()["items"]]
            assert names == [expected], term

    @pytest.mark.parametrize("term", ["%", "_", "a_e"])
    async def test_search_wildcards_match_literally(
        self, client: AsyncClient, auth_headers: dict, term: str
    ) -> None:
        await _create_guest(client, auth_headers, name="Grace Lee", email="grace@test.com", phone="555")

        response = await client.get("/api/v1/guests", params={"search": term}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0}

    async def test_search_finds_literal_underscore(self, client: AsyncClient, auth_headers: dict) -> None:
        await _create_guest(client, auth_headers, name="Listed", notes="on vip_list")
        await _create_guest(client, auth_headers, name="Unlisted", notes="on vipxlist")

        response = await client.get("/api/v1/guests", params={"search": "p_l"}, headers=auth_headers)
        assert [g["name"] for g in response.json()["items"]] == ["Listed"]

    async def test_pagination(self, client: AsyncClient, auth_headers: dict) -> None:
        for name in ("A", "B", "C", "D"):
            await _create_guest(client, auth_headers, name=name)

        response = await client.get("/api/v1/guests", params={"skip": 1, "limit": 2}, headers=auth_headers)
        data = response.json()
        assert data["total"] == 4
        assert [g["name"] for g in data["items"]] == ["B", "C"]

    async def test_list_only_own_guests(
        self, client: AsyncClient, auth_headers: dict, other_auth_headers: dict
    ) -> None:
        await _create_guest(client, auth_headers, name="Mine")
        await _create_guest(client, other_auth_headers, name="Theirs")

        response = await client.get("/api/v1/guests", headers=auth_headers)
        assert [g["name"] for g in response.json()["items"]] == ["Mine"]


# ---------------------------------------------------------------------------
# GET /api/v1/guests/{id}
# ---------------------------------------------------------------------------


class TestGetGuest:
    """Tests for retrieving a single guest."""

    async def test_get_success(self, client: AsyncClient, auth_headers: dict, test_guest: dict) -> None:
        response = await client.get(f"/api/v1/guests/{test_guest['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["email"] == test_guest["email"]

    async def test_get_not_found(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.get(f"/api/v1/guests/{uuid.uuid4()}", headers=auth_headers)
        assert response.status_code == 404

    async def test_get_other_owners_guest(
        self, client: AsyncClient, test_guest: dict, other_auth_headers: dict
    ) -> None:
        response = await client.get(f"/api/v1/guests/{test_guest['id']}", headers=other_auth_headers)
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# PUT /api/v1/guests/{id}
# ---------------------------------------------------------------------------


class TestUpdateGuest:
    """Tests for updating guests."""

    async def test_update_partial(self, client: AsyncClient, auth_headers: dict, test_guest: dict) -> None:
        response = await client.put(
            f"/api/v1/guests/{test_guest['id']}",
            json={"phone": "+61499999999"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["phone"] == "+61499999999"
        assert data["name"] == test_guest["name"]
        assert data["notes"] == test_guest["notes"]

    async def test_clear_notes(self, client: AsyncClient, auth_headers: dict, test_guest: dict) -> None:
        response = await client.put(
            f"/api/v1/guests/{test_guest['id']}",
            json={"notes": None},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["notes"] is None

    async def test_null_name_is_ignored(self, client: AsyncClient, auth_headers: dict, test_guest: dict) -> None:
        response = await client.put(
            f"/api/v1/guests/{test_guest['id']}",
            json={"name": None},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["name"] == test_guest["name"]

    async def test_update_email_to_duplicate(
        self, client: AsyncClient, auth_headers: dict, test_guest: dict
    ) -> None:
        other = await _create_guest(client, auth_headers, name="Other")
        response = await client.put(
            f"/api/v1/guests/{test_guest['id']}",
            json={"email": other["email"]},
            headers=auth_headers,
        )
        assert response.status_code == 409

    async def test_update_keeps_own_email(self, client: AsyncClient, auth_headers: dict, test_guest: dict) -> None:
        response = await client.put(
            f"/api/v1/guests/{test_guest['id']}",
            json={"email": test_guest["email"], "name": "Renamed"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"

    async def test_update_other_owners_guest(
        self, client: AsyncClient, test_guest: dict, other_auth_headers: dict
    ) -> None:
        response = await client.put(
            f"/api/v1/guests/{test_guest['id']}",
            json={"name": "Hijacked"},
            headers=other_auth_headers,
        )
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# DELETE /api/v1/guests/{id}
# ---------------------------------------------------------------------------


class TestDeleteGuest:
    """Tests for deleting guests."""

    async def test_delete_success(self, client: AsyncClient, auth_headers: dict, test_guest: dict) -> None:
        response = await client.delete(f"/api/v1/guests/{test_guest['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Guest deleted"}

        response = await client.get(f"/api/v1/guests/{test_guest['id']}", headers=auth_headers)
        assert response.status_code == 404

    async def test_delete_removes_bookings(
        self, client: AsyncClient, auth_headers: dict, test_guest: dict, make_booking
    ) -> None:
        await make_booking(date(2024, 3, 1), date(2024, 3, 4))
        await make_booking(date(2024, 4, 1), date(2024, 4, 2))

        response = await client.delete(f"/api/v1/guests/{test_guest['id']}", headers=auth_headers)
        assert response.status_code == 200

        response = await client.get("/api/v1/bookings", headers=auth_headers)
        assert response.json()["total"] == 0

    async def test_delete_other_owners_guest(
        self, client: AsyncClient, test_guest: dict, other_auth_headers: dict
    ) -> None:
        response = await client.delete(f"/api/v1/guests/{test_guest['id']}", headers=other_auth_headers)
        assert response.status_code == 404
