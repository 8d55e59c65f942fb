"""Favorites API router: the current user's saved properties."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.api.v1.properties import build_list_items
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.favorite import FavoriteCheckResponse, FavoriteListResponse, FavoriteResponse
from app.services import favorite_service

router = APIRouter(prefix="/api/v1/favorites", tags=["favorites"])


@router.get("", response_model=FavoriteListResponse, summary="List favorite properties")
async def list_favorites(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> FavoriteListResponse:
    properties = await favorite_service.get_favorite_properties(db, current_user.id)
    items = await build_list_items(db, properties)
    return FavoriteListResponse(items=items, total=len(items))


@router.get(
    "/{property_id}/check",
    response_model=FavoriteCheckResponse,
    summary="Check whether a property is favorited",
)
async def check_favorite(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> FavoriteCheckResponse:
    return FavoriteCheckResponse(is_favorited=await favorite_service.is_favorited(db, current_user.id, property_id))


@router.post(
    "/{property_id}",
    response_model=FavoriteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a property to favorites",
)
async def add_favorite(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> FavoriteResponse:
    favorite = await favorite_service.add_favorite(db, current_user.id, property_id)
    return FavoriteResponse.model_validate(favorite)


@router.delete("/{property_id}", response_model=MessageResponse, summary="Remove a property from favorites")
async def remove_favorite(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    await favorite_service.remove_favorite(db, current_user.id, property_id)
    return MessageResponse(message="Removed from favorites")
