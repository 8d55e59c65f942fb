"""Pydantic v2 request/response schemas for property endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.schemas.auth import UserSummary
from app.schemas.review import ReviewResponse

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyCreate(BaseModel):
    """Schema for listing a new property."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    property_type: str = Field(..., min_length=1, max_length=50)
    price_per_night: Decimal = Field(..., gt=0)
    cleaning_fee: Decimal = Field(Decimal("0"), ge=0)
    bedrooms: int = Field(..., ge=1)
    bathrooms: Decimal = Field(..., gt=0)
    max_guests: int = Field(..., ge=1)
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    latitude: float | None = None
    longitude: float | None = None
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(..., min_length=1)


class PropertyUpdate(BaseModel):
    """Schema for partially updating a property. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    property_type: str | None = Field(None, min_length=1, max_length=50)
    price_per_night: Decimal | None = Field(None, gt=0)
    cleaning_fee: Decimal | None = Field(None, ge=0)
    bedrooms: int | None = Field(None, ge=1)
    bathrooms: Decimal | None = Field(None, gt=0)
    max_guests: int | None = Field(None, ge=1)
    address: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=100)
    country: str | None = Field(None, min_length=1, max_length=100)
    latitude: float | None = None
    longitude: float | None = None
    amenities: list[str] | None = None
    images: list[str] | None = Field(None, min_length=1)

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "PropertyUpdate":
        """Only the coordinates may be cleared with an explicit null."""
        clearable = {"latitude", "longitude"}
        nulled = sorted(name for name in self.model_fields_set - clearable if getattr(self, name) is None)
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertyResponse(BaseModel):
    """Property information returned from the API."""

    id: uuid.UUID
    host_id: uuid.UUID
    title: str
    description: str
    property_type: str
    price_per_night: Decimal
    cleaning_fee: Decimal
    bedrooms: int
    bathrooms: Decimal
    max_guests: int
    address: str
    city: str
    country: str
    latitude: float | None = None
    longitude: float | None = None
    amenities: list[str] = []
    images: list[str] = []
    is_active: bool
    created_at: datetime
    updated_at: datetime
    host: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class PropertyListItem(PropertyResponse):
    """Property with its review aggregate, used in search results and favorites."""

    average_rating: float | None = None
    review_count: int = 0


class PropertyDetailResponse(PropertyListItem):
    reviews: list[ReviewResponse] = []


class HostPropertyResponse(PropertyListItem):
    """A host's own listing with the number of bookings holding its calendar."""

    active_booking_count: int = 0


class PropertyListResponse(BaseModel):
    items: list[PropertyListItem]
    total: int


class HostPropertyListResponse(BaseModel):
    items: list[HostPropertyResponse]
    total: int
