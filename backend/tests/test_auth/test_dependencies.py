"""Tests for auth dependencies: get_current_user and get_current_host edge cases."""

import uuid
from datetime import timedelta

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt import create_access_token, create_token_pair
from app.auth.passwords import hash_password
from app.models.user import User


class TestGetCurrentUser:
    """Test get_current_user dependency via the /me endpoint."""

    async def test_expired_token_rejected(self, client: AsyncClient, guest_user: User):
        token = create_access_token({"sub": str(guest_user.id)}, expires_delta=timedelta(seconds=-1))
        headers = {"Authorization": f"Bearer {token}"}
        response = await client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 401

    async def test_invalid_token_format(self, client: AsyncClient):
        headers = {"Authorization": "Bearer not.a.valid.jwt"}
        response = await client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 401

    async def test_refresh_token_type_rejected(self, client: AsyncClient, guest_user: User):
        tokens = create_token_pair(str(guest_user.id))
        headers = {"Authorization": f"Bearer {tokens['refresh_token']}"}
        response = await client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 401

    async def test_nonexistent_user_id_rejected(self, client: AsyncClient):
        token = create_access_token({"sub": str(uuid.uuid4())})
        headers = {"Authorization": f"Bearer {token}"}
        response = await client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 401

    async def test_non_uuid_subject_rejected(self, client: AsyncClient):
        token = create_access_token({"sub": "user-123"})
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_inactive_user_rejected(self, client: AsyncClient, db_session: AsyncSession):
        user = User(
            email=f"inactive-{uuid.uuid4().hex[:8]}@test.com",
            hashed_password=hash_password("testpass"),
            first_name="Inactive",
            last_name="User",
            is_active=False,
        )
        db_session.add(user)
        await db_session.flush()

        token = create_access_token({"sub": str(user.id)})
        headers = {"Authorization": f"Bearer {token}"}
        response = await client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 401


class TestGetCurrentHost:
    """Host-only routes check the stored flag, not the token claim."""

    async def test_guest_rejected(self, client: AsyncClient, guest_headers: dict):
        response = await client.get("/api/v1/properties/my-listings", headers=guest_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Host privileges required"

    async def test_forged_host_claim_rejected(self, client: AsyncClient, guest_user: User):
        token = create_access_token({"sub": str(guest_user.id), "host": True})
        response = await client.get(
            "/api/v1/properties/my-listings",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 403

    async def test_host_allowed(self, client: AsyncClient, host_headers: dict):
        response = await client.get("/api/v1/properties/my-listings", headers=host_headers)
        assert response.status_code == 200
