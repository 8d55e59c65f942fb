"""Tests for authentication endpoints: register, login, refresh, me, profile, become-host."""

import uuid

import pytest
from httpx import AsyncClient

from app.auth.jwt import decode_token
from app.models.user import User

pytestmark = pytest.mark.asyncio


def _registration(**overrides) -> dict:
    unique = uuid.uuid4().hex[:8]
    payload = {
        "email": f"newuser-{unique}@test.com",
        "password": "securepass123",
        "first_name": "New",
        "last_name": "User",
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# POST /api/v1/auth/register
# ---------------------------------------------------------------------------


class TestRegister:
    """Tests for user registration."""

    async def test_register_success(self, client: AsyncClient) -> None:
        payload = _registration(phone="+44 20 7946 0000")
        response = await client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == payload["email"]
        assert data["user"]["first_name"] == "New"
        assert data["user"]["last_name"] == "User"
        assert data["user"]["phone"] == "+44 20 7946 0000"
        assert data["user"]["is_host"] is False
        assert data["user"]["is_active"] is True
        assert data["tokens"]["access_token"]
        assert data["tokens"]["refresh_token"]
        assert data["tokens"]["token_type"] == "bearer"

    async def test_register_ignores_host_flag(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/register", json=_registration(is_host=True))
        assert response.status_code == 201
        assert response.json()["user"]["is_host"] is False
        claims = decode_token(response.json()["tokens"]["access_token"])
        assert claims["host"] is False

    async def test_register_duplicate_email(self, client: AsyncClient) -> None:
        payload = _registration()
        resp1 = await client.post("/api/v1/auth/register", json=payload)
        assert resp1.status_code == 201

        resp2 = await client.post("/api/v1/auth/register", json=payload)
        assert resp2.status_code == 409
        assert resp2.json()["detail"] == "Email already registered"

    async def test_register_short_password(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/register", json=_registration(password="short"))
        assert response.status_code == 422

    async def test_register_invalid_email(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/register", json=_registration(email="not-an-email"))
        assert response.status_code == 422

    async def test_register_missing_last_name(self, client: AsyncClient) -> None:
        payload = _registration()
        del payload["last_name"]
        response = await client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# POST /api/v1/auth/login
# ---------------------------------------------------------------------------


class TestLogin:
    """Tests for email/password login."""

    async def test_login_success(self, client: AsyncClient) -> None:
        payload = _registration()
        await client.post("/api/v1/auth/register", json=payload)

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": payload["email"], "password": payload["password"]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["email"] == payload["email"]
        assert data["tokens"]["access_token"]
        assert data["tokens"]["refresh_token"]

    async def test_login_wrong_password(self, client: AsyncClient, guest_user: User) -> None:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": guest_user.email, "password": "wrongpassword"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    async def test_login_nonexistent_user(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@nowhere.com", "password": "irrelevant1"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    async def test_login_host_token_carries_host_claim(self, client: AsyncClient, host_user: User) -> None:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": host_user.email, "password": "testpass123"},
        )
        assert response.status_code == 200
        assert decode_token(response.json()["tokens"]["access_token"])["host"] is True


# ---------------------------------------------------------------------------
# GET /api/v1/auth/me and PUT /api/v1/auth/profile
# ---------------------------------------------------------------------------


class TestProfile:
    """Tests for the authenticated user profile endpoints."""

    async def test_me_authenticated(self, client: AsyncClient, guest_headers: dict, guest_user: User) -> None:
        response = await client.get("/api/v1/auth/me", headers=guest_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(guest_user.id)
        assert data["email"] == guest_user.email
        assert data["is_host"] is False

    async def test_me_unauthenticated(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/auth/me")
        # HTTPBearer answers 401 or 403 depending on the FastAPI release
        assert response.status_code in (401, 403)

    async def test_update_profile_partial(self, client: AsyncClient, guest_headers: dict) -> None:
        response = await client.put(
            "/api/v1/auth/profile",
            json={"phone": "+1 202 555 0199"},
            headers=guest_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["phone"] == "+1 202 555 0199"
        assert data["first_name"] == "Gary"

    async def test_null_name_rejected(self, client: AsyncClient, guest_headers: dict) -> None:
        response = await client.put("/api/v1/auth/profile", json={"first_name": None}, headers=guest_headers)
        assert response.status_code == 422
        assert "Fields cannot be null: first_name" in response.text

    async def test_phone_can_be_cleared(self, client: AsyncClient, guest_headers: dict) -> None:
        await client.put("/api/v1/auth/profile", json={"phone": "+1 202 555 0199"}, headers=guest_headers)
        response = await client.put("/api/v1/auth/profile", json={"phone": None}, headers=guest_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["phone"] is None
        assert data["first_name"] == "Gary"


# ---------------------------------------------------------------------------
# POST /api/v1/auth/become-host
# ---------------------------------------------------------------------------


class TestBecomeHost:
    async def test_guest_becomes_host(self, client: AsyncClient, guest_headers: dict) -> None:
        response = await client.post("/api/v1/auth/become-host", headers=guest_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["is_host"] is True
        assert decode_token(data["tokens"]["access_token"])["host"] is True

    async def test_become_host_is_idempotent(self, client: AsyncClient, host_headers: dict) -> None:
        first = await client.post("/api/v1/auth/become-host", headers=host_headers)
        second = await client.post("/api/v1/auth/become-host", headers=host_headers)
        assert first.status_code == second.status_code == 200
        assert second.json()["user"]["is_host"] is True

    async def test_new_host_can_list_property(self, client: AsyncClient, guest_headers: dict) -> None:
        await client.post("/api/v1/auth/become-host", headers=guest_headers)
        response = await client.get("/api/v1/properties/my-listings", headers=guest_headers)
        assert response.status_code == 200
        assert response.json()["total"] == 0


# ---------------------------------------------------------------------------
# POST /api/v1/auth/refresh
# ---------------------------------------------------------------------------


class TestRefresh:
    """Tests for token refresh."""

    async def test_refresh_success(self, client: AsyncClient) -> None:
        reg_resp = await client.post("/api/v1/auth/register", json=_registration())
        assert reg_resp.status_code == 201
        refresh_token = reg_resp.json()["tokens"]["refresh_token"]

        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
        assert response.status_code == 200
        data = response.json()
        assert data["access_token"]
        assert data["refresh_token"]

    async def test_refresh_rejects_access_token(self, client: AsyncClient) -> None:
        reg_resp = await client.post("/api/v1/auth/register", json=_registration())
        access_token = reg_resp.json()["tokens"]["access_token"]

        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": access_token})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token type"

    async def test_refresh_garbage_token(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": "garbage"})
        assert response.status_code == 401
