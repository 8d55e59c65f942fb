"""Tests for favorites endpoints."""

import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestFavorites:
    async def test_add_check_list_remove(self, client: AsyncClient, guest_headers: dict, test_property) -> None:
        url = f"/api/v1/favorites/{test_property.id}"

        check = await client.get(f"{url}/check", headers=guest_headers)
        assert check.json() == {"is_favorited": False}

        response = await client.post(url, headers=guest_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["property_id"] == str(test_property.id)
        assert data["property"]["title"] == "Seaside Cottage"

        check = await client.get(f"{url}/check", headers=guest_headers)
        assert check.json() == {"is_favorited": True}

        listing = await client.get("/api/v1/favorites", headers=guest_headers)
        assert listing.status_code == 200
        assert listing.json()["total"] == 1
        assert listing.json()["items"][0]["id"] == str(test_property.id)
        assert listing.json()["items"][0]["review_count"] == 0

        removed = await client.delete(url, headers=guest_headers)
        assert removed.status_code == 200
        assert removed.json() == {"message": "Removed from favorites"}

        listing = await client.get("/api/v1/favorites", headers=guest_headers)
        assert listing.json() == {"items": [], "total": 0}

    async def test_duplicate_favorite(self, client: AsyncClient, guest_headers: dict, test_property) -> None:
        await client.post(f"/api/v1/favorites/{test_property.id}", headers=guest_headers)
        response = await client.post(f"/api/v1/favorites/{test_property.id}", headers=guest_headers)
        assert response.status_code == 409
        assert response.json() == {"detail": "Property already in favorites", "code": "conflict"}

    async def test_favorite_unknown_property(self, client: AsyncClient, guest_headers: dict) -> None:
        response = await client.post(f"/api/v1/favorites/{uuid.uuid4()}", headers=guest_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Property not found"

    async def test_remove_missing_favorite(self, client: AsyncClient, guest_headers: dict, test_property) -> None:
        response = await client.delete(f"/api/v1/favorites/{test_property.id}", headers=guest_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Favorite not found"

    async def test_favorites_are_per_user(
        self, client: AsyncClient, guest_headers: dict, other_headers: dict, test_property
    ) -> None:
        await client.post(f"/api/v1/favorites/{test_property.id}", headers=guest_headers)
        response = await client.get("/api/v1/favorites", headers=other_headers)
        assert response.json()["total"] == 0

    async def test_requires_auth(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/favorites")
        assert response.status_code in (401, 403)
