"""Pydantic v2 schemas for favorites endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.schemas.property import PropertyListItem, PropertyResponse


class FavoriteResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    property_id: uuid.UUID
    created_at: datetime
    property: PropertyResponse

    model_config = ConfigDict(from_attributes=True)


class FavoriteListResponse(BaseModel):
    items: list[PropertyListItem]
    total: int


class FavoriteCheckResponse(BaseModel):
    is_favorited: bool
