"""Property reviews written by guests after a finished stay."""

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, ForbiddenError, NotFoundError, ValidationFailedError
from app.models.booking import Booking
from app.models.review import Review
from app.services.booking_service import finished_stay_clause, is_stay_finished

logger = logging.getLogger(__name__)


def _check_rating(rating: int) -> None:
    if rating < 1 or rating > 5:
        raise ValidationFailedError("Rating must be between 1 and 5")


async def _has_review(db: AsyncSession, booking_id: uuid.UUID) -> bool:
    result = await db.execute(select(Review.id).where(Review.booking_id == booking_id))
    return result.scalar_one_or_none() is not None


async def _reload(db: AsyncSession, review_id: uuid.UUID) -> Review:
    result = await db.execute(
        select(Review).where(Review.id == review_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def create_review(
    db: AsyncSession,
    user_id: uuid.UUID,
    *,
    property_id: uuid.UUID,
    booking_id: uuid.UUID,
    rating: int,
    comment: str,
) -> Review:
    _check_rating(rating)
    if not comment or not comment.strip():
        raise ValidationFailedError("Comment is required")

    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")

    if booking.guest_id != user_id:
        raise ForbiddenError("You can only review your own bookings")

    if not is_stay_finished(booking):
        raise ValidationFailedError("You can only review completed trips")

    if booking.property_id != property_id:
        raise ValidationFailedError("Booking does not match the property")

    if await _has_review(db, booking_id):
        raise ConflictError("You have already reviewed this booking")

    review = Review(
        user_id=user_id,
        property_id=property_id,
        booking_id=booking_id,
        rating=rating,
        comment=comment,
    )
    # One review per booking is enforced by a unique index as well
    try:
        async with db.begin_nested():
            db.add(review)
    except IntegrityError:
        raise ConflictError("You have already reviewed this booking") from None
    logger.info("User %s reviewed property %s (booking %s)", user_id, property_id, booking_id)
    return await _reload(db, review.id)


async def get_property_reviews(db: AsyncSession, property_id: uuid.UUID) -> Sequence[Review]:
    result = await db.execute(
        select(Review).where(Review.property_id == property_id).order_by(Review.created_at.desc())
    )
    return result.scalars().all()


async def get_user_review(db: AsyncSession, user_id: uuid.UUID, property_id: uuid.UUID) -> Review | None:
    """The review the user left for ``property_id`` on a finished stay, if any."""
    result = await db.execute(
        select(Review)
        .join(Booking, Review.booking_id == Booking.id)
        .where(
            Booking.guest_id == user_id,
            Booking.property_id == property_id,
            finished_stay_clause(),
        )
        .order_by(Review.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def _get_own_review(db: AsyncSession, review_id: uuid.UUID, user_id: uuid.UUID, action: str) -> Review:
    review = await db.get(Review, review_id)
    if review is None:
        raise NotFoundError("Review not found")
    if review.user_id != user_id:
        raise ForbiddenError(f"You can only {action} your own reviews")
    return review


async def update_review(
    db: AsyncSession,
    user_id: uuid.UUID,
    review_id: uuid.UUID,
    *,
    rating: int | None = None,
    comment: str | None = None,
) -> Review:
    review = await _get_own_review(db, review_id, user_id, "update")

    if rating is not None:
        _check_rating(rating)
    if comment is not None and not comment.strip():
        raise ValidationFailedError("Comment cannot be empty")

    if rating is not None:
        review.rating = rating
    if comment is not None:
        review.comment = comment
    await db.flush()
    return await _reload(db, review.id)


async def delete_review(db: AsyncSession, user_id: uuid.UUID, review_id: uuid.UUID) -> None:
    review = await _get_own_review(db, review_id, user_id, "delete")
    await db.delete(review)
    await db.flush()
