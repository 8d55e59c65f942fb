"""Guest reviews written by hosts once a stay has finished."""

import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, ForbiddenError, NotFoundError, ValidationFailedError
from app.models.booking import Booking
from app.models.review import GuestReview
from app.services.booking_service import is_stay_finished

MIN_COMMENT_LENGTH = 10
DUPLICATE_REVIEW_MESSAGE = "You have already reviewed this guest for this booking"


def _validate(rating: int | None, comment: str | None) -> None:
    if rating is not None and (rating < 1 or rating > 5):
        raise ValidationFailedError("Rating must be between 1 and 5")
    if comment is not None and len(comment.strip()) < MIN_COMMENT_LENGTH:
        raise ValidationFailedError(f"Comment must be at least {MIN_COMMENT_LENGTH} characters")


async def _has_review(db: AsyncSession, booking_id: uuid.UUID) -> bool:
    result = await db.execute(select(GuestReview.id).where(GuestReview.booking_id == booking_id))
    return result.scalar_one_or_none() is not None


async def _reload(db: AsyncSession, review_id: uuid.UUID) -> GuestReview:
    result = await db.execute(
        select(GuestReview).where(GuestReview.id == review_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def _get_booking_for_host(db: AsyncSession, booking_id: uuid.UUID, host_id: uuid.UUID, message: str) -> Booking:
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    if booking.property.host_id != host_id:
        raise ForbiddenError(message)
    return booking


async def create_guest_review(
    db: AsyncSession,
    host_id: uuid.UUID,
    *,
    booking_id: uuid.UUID,
    guest_id: uuid.UUID,
    rating: int,
    comment: str,
) -> GuestReview:
    _validate(rating, comment or "")

    booking = await _get_booking_for_host(
        db, booking_id, host_id, "You can only review guests for your own properties"
    )

    if booking.guest_id != guest_id:
        raise ValidationFailedError("Guest does not match the booking")

    if not is_stay_finished(booking):
        raise ValidationFailedError("You can only review guests after their stay is complete")

    if await _has_review(db, booking_id):
        raise ConflictError(DUPLICATE_REVIEW_MESSAGE)

    review = GuestReview(
        host_id=host_id,
        guest_id=guest_id,
        booking_id=booking_id,
        rating=rating,
        comment=comment.strip(),
    )
    try:
        async with db.begin_nested():
            db.add(review)
    except IntegrityError:
        raise ConflictError(DUPLICATE_REVIEW_MESSAGE) from None
    return await _reload(db, review.id)


async def get_guest_reviews(db: AsyncSession, guest_id: uuid.UUID) -> Sequence[GuestReview]:
    result = await db.execute(
        select(GuestReview).where(GuestReview.guest_id == guest_id).order_by(GuestReview.created_at.desc())
    )
    return result.scalars().all()


async def get_host_reviews(db: AsyncSession, host_id: uuid.UUID) -> Sequence[GuestReview]:
    result = await db.execute(
        select(GuestReview).where(GuestReview.host_id == host_id).order_by(GuestReview.created_at.desc())
    )
    return result.scalars().all()


async def get_review_by_booking(db: AsyncSession, booking_id: uuid.UUID, host_id: uuid.UUID) -> GuestReview | None:
    await _get_booking_for_host(db, booking_id, host_id, "You can only view reviews for your own properties")
    result = await db.execute(select(GuestReview).where(GuestReview.booking_id == booking_id))
    return result.scalar_one_or_none()


async def _get_own_review(db: AsyncSession, review_id: uuid.UUID, host_id: uuid.UUID, action: str) -> GuestReview:
    review = await db.get(GuestReview, review_id)
    if review is None:
        raise NotFoundError("Review not found")
    if review.host_id != host_id:
        raise ForbiddenError(f"You can only {action} your own reviews")
    return review


async def update_guest_review(
    db: AsyncSession,
    host_id: uuid.UUID,
    review_id: uuid.UUID,
    *,
    rating: int | None = None,
    comment: str | None = None,
) -> GuestReview:
    review = await _get_own_review(db, review_id, host_id, "update")
    _validate(rating, comment)
    if rating is not None:
        review.rating = rating
    if comment is not None:
        review.comment = comment.strip()
    await db.flush()
    return await _reload(db, review.id)


async def delete_guest_review(db: AsyncSession, host_id: uuid.UUID, review_id: uuid.UUID) -> None:
    review = await _get_own_review(db, review_id, host_id, "delete")
    await db.delete(review)
    await db.flush()
