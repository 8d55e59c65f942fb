"""Landing-page aggregates for guests and hosts."""

import uuid
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import BLOCKING_STATUSES, Booking, BookingStatus
from app.models.favorite import Favorite
from app.models.property import Property
from app.models.review import GuestReview, Review
from app.services.booking_service import finished_stay_clause, utc_today
from app.services.earnings_service import ZERO, get_earned_bookings

DASHBOARD_LIMIT = 5


async def _bookings(db: AsyncSession, *filters, order_by) -> list[Booking]:
    result = await db.execute(
        select(Booking)
        .where(*filters)
        .order_by(order_by)
        .limit(DASHBOARD_LIMIT)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_guest_dashboard(db: AsyncSession, user_id: uuid.UUID, today: date | None = None) -> dict:
    today = today or utc_today()
    finished = finished_stay_clause(today)

    upcoming = await _bookings(
        db,
        Booking.guest_id == user_id,
        Booking.status.in_(BLOCKING_STATUSES),
        Booking.check_in >= today,
        order_by=Booking.check_in.asc(),
    )
    past = await _bookings(db, Booking.guest_id == user_id, finished, order_by=Booking.check_out.desc())
    pending_reviews = await _bookings(
        db,
        Booking.guest_id == user_id,
        finished,
        Booking.id.not_in(select(Review.booking_id)),
        order_by=Booking.check_out.desc(),
    )

    favorite_count = await db.scalar(select(func.count(Favorite.id)).where(Favorite.user_id == user_id))
    total_trips = await db.scalar(
        select(func.count(Booking.id)).where(
            Booking.guest_id == user_id,
            Booking.status.in_((BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value)),
        )
    )

    return {
        "upcoming_trips": upcoming,
        "past_trips": past,
        "pending_reviews": pending_reviews,
        "favorite_count": favorite_count or 0,
        "total_trips": total_trips or 0,
    }


async def get_host_dashboard(db: AsyncSession, host_id: uuid.UUID, today: date | None = None) -> dict:
    today = today or utc_today()
    finished = finished_stay_clause(today)

    listings = (await db.execute(select(Property.id, Property.is_active).where(Property.host_id == host_id))).all()
    property_ids = [row.id for row in listings]
    on_host_property = Booking.property_id.in_(property_ids)

    pending = await _bookings(
        db,
        on_host_property,
        Booking.status == BookingStatus.PENDING.value,
        order_by=Booking.created_at.desc(),
    )
    upcoming = await _bookings(
        db,
        on_host_property,
        Booking.status == BookingStatus.CONFIRMED.value,
        Booking.check_in >= today,
        order_by=Booking.check_in.asc(),
    )
    recent = await _bookings(db, on_host_property, finished, order_by=Booking.check_out.desc())
    pending_guest_reviews = await _bookings(
        db,
        on_host_property,
        finished,
        Booking.id.not_in(select(GuestReview.booking_id)),
        order_by=Booking.check_out.desc(),
    )

    earned = await get_earned_bookings(db, host_id, today)
    month_start = today.replace(day=1)

    average, total_reviews = (
        await db.execute(
            select(func.avg(Review.rating), func.count(Review.id)).where(Review.property_id.in_(property_ids))
        )
    ).one()

    return {
        "total_listings": len(listings),
        "active_listings": sum(1 for row in listings if row.is_active),
        "pending_bookings": pending,
        "upcoming_bookings": upcoming,
        "recent_bookings": recent,
        "total_earnings": sum((b.total_price for b in earned), ZERO),
        "this_month_earnings": sum((b.total_price for b in earned if b.check_in >= month_start), ZERO),
        "pending_guest_reviews": pending_guest_reviews,
        "average_rating": round(float(average), 1) if average is not None else None,
        "total_reviews": total_reviews,
    }
