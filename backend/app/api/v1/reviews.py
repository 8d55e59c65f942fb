"""Property reviews API router."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from app.services import review_service

router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


@router.get(
    "/property/{property_id}",
    response_model=list[ReviewResponse],
    summary="List a property's reviews",
)
async def list_property_reviews(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> list[ReviewResponse]:
    reviews = await review_service.get_property_reviews(db, property_id)
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.post(
    "",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Review a finished stay",
)
async def create_review(
    body: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ReviewResponse:
    review = await review_service.create_review(db, current_user.id, **body.model_dump())
    return ReviewResponse.model_validate(review)


@router.get(
    "/user-review/{property_id}",
    response_model=ReviewResponse | None,
    summary="Get the current user's review of a property",
)
async def get_user_review(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ReviewResponse | None:
    """Returns ``null`` when the user has not reviewed the property."""
    review = await review_service.get_user_review(db, current_user.id, property_id)
    return ReviewResponse.model_validate(review) if review else None


@router.put("/{review_id}", response_model=ReviewResponse, summary="Update your review")
async def update_review(
    review_id: uuid.UUID,
    body: ReviewUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ReviewResponse:
    review = await review_service.update_review(db, current_user.id, review_id, **body.model_dump(exclude_unset=True))
    return ReviewResponse.model_validate(review)


@router.delete("/{review_id}", response_model=MessageResponse, summary="Delete your review")
async def delete_review(
    review_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    await review_service.delete_review(db, current_user.id, review_id)
    return MessageResponse(message="Review deleted successfully")
