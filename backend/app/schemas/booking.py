"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.auth import GuestContact, UserSummary
from app.schemas.review import ReviewResponse

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """Schema for requesting a booking.

    The date range is checked by the booking engine, which reports a stable
    ``validation_failed`` error instead of a schema error.
    """

    property_id: uuid.UUID
    check_in: date
    check_out: date
    number_of_guests: int = Field(..., ge=1)
    special_requests: str | None = Field(None, max_length=2000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingPropertySummary(BaseModel):
    """The slice of a property shown alongside a booking."""

    id: uuid.UUID
    host_id: uuid.UUID
    title: str
    city: str
    country: str
    images: list[str] = []
    price_per_night: Decimal
    cleaning_fee: Decimal
    host: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class BookingResponse(BaseModel):
    """Standard booking response returned from lifecycle operations."""

    id: uuid.UUID
    property_id: uuid.UUID
    guest_id: uuid.UUID
    check_in: date
    check_out: date
    number_of_guests: int
    total_price: Decimal
    special_requests: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingDetailResponse(BookingResponse):
    """Booking with property, host and guest denormalized for display."""

    property: BookingPropertySummary
    guest: GuestContact


class GuestBookingResponse(BookingResponse):
    """A booking as seen by its guest, with the review they left (if any)."""

    property: BookingPropertySummary
    review: ReviewResponse | None = None


class HostBookingResponse(BookingResponse):
    """A booking as seen by the host of the property."""

    property: BookingPropertySummary
    guest: GuestContact


class GuestBookingListResponse(BaseModel):
    items: list[GuestBookingResponse]
    total: int


class HostBookingListResponse(BaseModel):
    items: list[HostBookingResponse]
    total: int


class SweepResponse(BaseModel):
    completed_count: int
