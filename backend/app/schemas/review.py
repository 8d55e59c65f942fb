"""Pydantic v2 schemas for property reviews and guest reviews.

Ratings and comments are range-checked by the services so that the error
messages stay stable; the schemas only enforce types.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.schemas.auth import UserSummary


class ReviewCreate(BaseModel):
    property_id: uuid.UUID
    booking_id: uuid.UUID
    rating: int
    comment: str


class ReviewUpdate(BaseModel):
    rating: int | None = None
    comment: str | None = None


class ReviewResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    property_id: uuid.UUID
    booking_id: uuid.UUID
    rating: int
    comment: str
    created_at: datetime
    updated_at: datetime
    user: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class GuestReviewCreate(BaseModel):
    booking_id: uuid.UUID
    guest_id: uuid.UUID
    rating: int
    comment: str


class GuestReviewUpdate(BaseModel):
    rating: int | None = None
    comment: str | None = None


class GuestReviewResponse(BaseModel):
    id: uuid.UUID
    host_id: uuid.UUID
    guest_id: uuid.UUID
    booking_id: uuid.UUID
    rating: int
    comment: str
    created_at: datetime
    updated_at: datetime
    host: UserSummary | None = None
    guest: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)
