"""Guest reviews API router: hosts rating the guests who stayed with them."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_current_host, get_db
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.review import GuestReviewCreate, GuestReviewResponse, GuestReviewUpdate
from app.services import guest_review_service

router = APIRouter(prefix="/api/v1/guest-reviews", tags=["guest-reviews"])


@router.post(
    "",
    response_model=GuestReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Review a guest after their stay",
)
async def create_guest_review(
    body: GuestReviewCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> GuestReviewResponse:
    review = await guest_review_service.create_guest_review(db, current_user.id, **body.model_dump())
    return GuestReviewResponse.model_validate(review)


@router.get("/host", response_model=list[GuestReviewResponse], summary="List reviews written by the current host")
async def list_host_reviews(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> list[GuestReviewResponse]:
    reviews = await guest_review_service.get_host_reviews(db, current_user.id)
    return [GuestReviewResponse.model_validate(r) for r in reviews]


@router.get(
    "/booking/{booking_id}",
    response_model=GuestReviewResponse | None,
    summary="Get the guest review for a booking",
)
async def get_booking_review(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> GuestReviewResponse | None:
    review = await guest_review_service.get_review_by_booking(db, booking_id, current_user.id)
    return GuestReviewResponse.model_validate(review) if review else None


@router.get("/guest/{guest_id}", response_model=list[GuestReviewResponse], summary="List reviews about a guest")
async def list_guest_reviews(
    guest_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[GuestReviewResponse]:
    reviews = await guest_review_service.get_guest_reviews(db, guest_id)
    return [GuestReviewResponse.model_validate(r) for r in reviews]


@router.put("/{review_id}", response_model=GuestReviewResponse, summary="Update a guest review")
async def update_guest_review(
    review_id: uuid.UUID,
    body: GuestReviewUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> GuestReviewResponse:
    review = await guest_review_service.update_guest_review(
        db, current_user.id, review_id, **body.model_dump(exclude_unset=True)
    )
    return GuestReviewResponse.model_validate(review)


@router.delete("/{review_id}", response_model=MessageResponse, summary="Delete a guest review")
async def delete_guest_review(
    review_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> MessageResponse:
    await guest_review_service.delete_guest_review(db, current_user.id, review_id)
    return MessageResponse(message="Guest review deleted successfully")
