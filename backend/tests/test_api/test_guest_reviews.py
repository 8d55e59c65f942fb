"""Tests for host-written guest review endpoints."""

import pytest
from httpx import AsyncClient

from app.models.booking import BookingStatus

pytestmark = pytest.mark.asyncio

COMMENT = "Tidy, quiet and communicative guest."


async def _post_guest_review(client: AsyncClient, headers: dict, booking, **overrides):
    payload = {
        "booking_id": str(booking.id),
        "guest_id": str(booking.guest_id),
        "rating": 5,
        "comment": COMMENT,
    }
    payload.update(overrides)
    return await client.post("/api/v1/guest-reviews", json=payload, headers=headers)


class TestCreateGuestReview:
    async def test_host_reviews_finished_stay(
        self, client: AsyncClient, host_headers: dict, host_user, guest_user, make_booking
    ) -> None:
        booking = await make_booking(start=-10, status=BookingStatus.COMPLETED)
        response = await _post_guest_review(client, host_headers, booking)
        assert response.status_code == 201
        data = response.json()
        assert data["host_id"] == str(host_user.id)
        assert data["guest_id"] == str(guest_user.id)
        assert data["guest"]["first_name"] == "Gary"
        assert data["comment"] == COMMENT

    async def test_stay_not_finished(self, client: AsyncClient, host_headers: dict, make_booking) -> None:
        booking = await make_booking(status=BookingStatus.CONFIRMED)
        response = await _post_guest_review(client, host_headers, booking)
        assert response.status_code == 400
        assert response.json()["detail"] == "You can only review guests after their stay is complete"

    async def test_other_hosts_booking(
        self, client: AsyncClient, other_host, auth_headers_for, make_booking
    ) -> None:
        booking = await make_booking(start=-10, status=BookingStatus.COMPLETED)
        response = await _post_guest_review(client, auth_headers_for(other_host), booking)
        assert response.status_code == 403
        assert response.json()["detail"] == "You can only review guests for your own properties"

    async def test_guest_mismatch(self, client: AsyncClient, host_headers: dict, other_user, make_booking) -> None:
        booking = await make_booking(start=-10, status=BookingStatus.COMPLETED)
        response = await _post_guest_review(client, host_headers, booking, guest_id=str(other_user.id))
        assert response.status_code == 400
        assert response.json()["detail"] == "Guest does not match the booking"

    async def test_short_comment(self, client: AsyncClient, host_headers: dict, make_booking) -> None:
        booking = await make_booking(start=-10, status=BookingStatus.COMPLETED)
        response = await _post_guest_review(client, host_headers, booking, comment="ok")
        assert response.status_code == 400
        assert response.json()["detail"] == "Comment must be at least 10 characters"

    async def test_duplicate(self, client: AsyncClient, host_headers: dict, make_booking) -> None:
        booking = await make_booking(start=-10, status=BookingStatus.COMPLETED)
        await _post_guest_review(client, host_headers, booking)
        response = await _post_guest_review(client, host_headers, booking, rating=4)
        assert response.status_code == 409
        assert response.json()["detail"] == "You have already reviewed this guest for this booking"

    async def test_guests_cannot_write_guest_reviews(
        self, client: AsyncClient, guest_headers: dict, make_booking
    ) -> None:
        booking = await make_booking(start=-10, status=BookingStatus.COMPLETED)
        response = await _post_guest_review(client, guest_headers, booking)
        assert response.status_code == 403


class TestReadAndModifyGuestReviews:
    async def test_lookup_endpoints(
        self, client: AsyncClient, host_headers: dict, other_headers: dict, guest_user, make_booking
    ) -> None:
        booking = await make_booking(start=-10, status=BookingStatus.COMPLETED)

        empty = await client.get(f"/api/v1/guest-reviews/booking/{booking.id}", headers=host_headers)
        assert empty.status_code == 200
        assert empty.json() is None

        created = (await _post_guest_review(client, host_headers, booking)).json()

        by_booking = await client.get(f"/api/v1/guest-reviews/booking/{booking.id}", headers=host_headers)
        assert by_booking.json()["id"] == created["id"]

        by_host = await client.get("/api/v1/guest-reviews/host", headers=host_headers)
        assert [r["id"] for r in by_host.json()] == [created["id"]]

        # Any signed-in user can read a guest's reputation
        by_guest = await client.get(f"/api/v1/guest-reviews/guest/{guest_user.id}", headers=other_headers)
        assert [r["id"] for r in by_guest.json()] == [created["id"]]

    async def test_booking_lookup_other_host(
        self, client: AsyncClient, other_host, auth_headers_for, make_booking
    ) -> None:
        booking = await make_booking(start=-10, status=BookingStatus.COMPLETED)
        response = await client.get(
            f"/api/v1/guest-reviews/booking/{booking.id}",
            headers=auth_headers_for(other_host),
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "You can only view reviews for your own properties"

    async def test_update_and_delete(self, client: AsyncClient, host_headers: dict, make_booking) -> None:
        booking = await make_booking(start=-10, status=BookingStatus.COMPLETED)
        created = (await _post_guest_review(client, host_headers, booking)).json()

        updated = await client.put(
            f"/api/v1/guest-reviews/{created['id']}",
            json={"rating": 4, "comment": "  Left the kitchen a little messy.  "},
            headers=host_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["rating"] == 4
        assert updated.json()["comment"] == "Left the kitchen a little messy."

        deleted = await client.delete(f"/api/v1/guest-reviews/{created['id']}", headers=host_headers)
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Guest review deleted successfully"}

    async def test_other_host_cannot_update(
        self, client: AsyncClient, host_headers: dict, other_host, auth_headers_for, make_booking
    ) -> None:
        booking = await make_booking(start=-10, status=BookingStatus.COMPLETED)
        created = (await _post_guest_review(client, host_headers, booking)).json()
        response = await client.put(
            f"/api/v1/guest-reviews/{created['id']}",
            json={"rating": 1},
            headers=auth_headers_for(other_host),
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "You can only update your own reviews"
