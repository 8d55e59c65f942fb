"""Pydantic v2 response schemas for the guest and host dashboards."""

from decimal import Decimal

from pydantic import BaseModel

from app.schemas.booking import GuestBookingResponse, HostBookingResponse


class GuestDashboard(BaseModel):
    upcoming_trips: list[GuestBookingResponse]
    past_trips: list[GuestBookingResponse]
    pending_reviews: list[GuestBookingResponse]
    favorite_count: int
    total_trips: int


class HostDashboard(BaseModel):
    total_listings: int
    active_listings: int
    pending_bookings: list[HostBookingResponse]
    upcoming_bookings: list[HostBookingResponse]
    recent_bookings: list[HostBookingResponse]
    total_earnings: Decimal
    this_month_earnings: Decimal
    pending_guest_reviews: list[HostBookingResponse]
    average_rating: float | None = None
    total_reviews: int
