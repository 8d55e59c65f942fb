"""Host earnings and occupancy reporting.

A booking counts towards earnings once the stay is finished: it is
``completed``, or ``confirmed`` with a check-out before today.  Month buckets
are keyed by check-in date.
"""

import uuid
from collections import defaultdict
from collections.abc import Sequence
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking, BookingStatus
from app.models.property import Property
from app.services.booking_service import finished_stay_clause, utc_today
from app.services.property_service import get_rating_stats

ZERO = Decimal("0.00")


def _month_start(day: date) -> date:
    return day.replace(day=1)


def _previous_month_start(day: date) -> date:
    return _month_start(_month_start(day) - timedelta(days=1))


def percentage_change(current: Decimal, previous: Decimal) -> float:
    if previous > 0:
        return round(float((current - previous) / previous * 100), 1)
    return 100.0 if current > 0 else 0.0


async def _host_properties(db: AsyncSession, host_id: uuid.UUID) -> Sequence[Property]:
    result = await db.execute(
        select(Property).where(Property.host_id == host_id).order_by(Property.created_at.desc())
    )
    return result.scalars().all()


async def get_earned_bookings(db: AsyncSession, host_id: uuid.UUID, today: date | None = None) -> Sequence[Booking]:
    result = await db.execute(
        select(Booking)
        .join(Property, Booking.property_id == Property.id)
        .where(Property.host_id == host_id, finished_stay_clause(today))
    )
    return result.scalars().all()


def _total(bookings: Sequence[Booking]) -> Decimal:
    return sum((Decimal(b.total_price) for b in bookings), ZERO)


async def get_summary(db: AsyncSession, host_id: uuid.UUID, today: date | None = None) -> dict:
    today = today or utc_today()
    this_month = _month_start(today)
    last_month = _previous_month_start(today)

    earned = await get_earned_bookings(db, host_id, today)
    total = _total(earned)
    this_month_total = _total([b for b in earned if b.check_in >= this_month])
    last_month_total = _total([b for b in earned if last_month <= b.check_in < this_month])

    count = len(earned)
    average = (total / count).quantize(Decimal("0.01")) if count else ZERO

    return {
        "total_earnings": total,
        "total_bookings": count,
        "completed_bookings": count,
        "average_booking_value": average,
        "this_month_earnings": this_month_total,
        "last_month_earnings": last_month_total,
        "percentage_change": percentage_change(this_month_total, last_month_total),
    }


async def get_monthly_earnings(
    db: AsyncSession, host_id: uuid.UUID, year: int, today: date | None = None
) -> list[dict]:
    """One entry per month of ``year`` that has already started."""
    today = today or utc_today()
    earned = await get_earned_bookings(db, host_id, today)

    totals: dict[int, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[int, int] = defaultdict(int)
    for booking in earned:
        if booking.check_in.year == year:
            totals[booking.check_in.month] += Decimal(booking.total_price)
            counts[booking.check_in.month] += 1

    months = []
    for month in range(1, 13):
        if date(year, month, 1) > today:
            break
        months.append({"month": month, "year": year, "earnings": totals[month], "bookings": counts[month]})
    return months


async def get_earnings_by_property(db: AsyncSession, host_id: uuid.UUID, today: date | None = None) -> list[dict]:
    properties = await _host_properties(db, host_id)
    earned = await get_earned_bookings(db, host_id, today)
    ratings = await get_rating_stats(db, (p.id for p in properties))

    by_property: dict[uuid.UUID, list[Booking]] = defaultdict(list)
    for booking in earned:
        by_property[booking.property_id].append(booking)

    rows = [
        {
            "property_id": prop.id,
            "property_title": prop.title,
            "property_image": prop.images[0] if prop.images else "",
            "total_earnings": _total(by_property[prop.id]),
            "booking_count": len(by_property[prop.id]),
            "average_rating": ratings[prop.id][0],
        }
        for prop in properties
    ]
    rows.sort(key=lambda row: row["total_earnings"], reverse=True)
    return rows


async def get_occupancy_rates(
    db: AsyncSession, host_id: uuid.UUID, days: int = 90, today: date | None = None
) -> list[dict]:
    """Booked nights inside ``[today - days, today]`` per property, as a percentage of ``days``."""
    today = today or utc_today()
    window_start = today - timedelta(days=days)
    properties = await _host_properties(db, host_id)

    result = await db.execute(
        select(Booking.property_id, Booking.check_in, Booking.check_out)
        .join(Property, Booking.property_id == Property.id)
        .where(
            Property.host_id == host_id,
            Booking.status.in_((BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value)),
            Booking.check_out >= window_start,
            Booking.check_in <= today,
        )
    )

    booked: dict[uuid.UUID, int] = defaultdict(int)
    for property_id, check_in, check_out in result.all():
        nights = (min(check_out, today) - max(check_in, window_start)).days
        if nights > 0:
            booked[property_id] += nights

    return [
        {
            "property_id": prop.id,
            "property_title": prop.title,
            "occupancy_rate": min(round(booked[prop.id] / days * 100, 1), 100.0),
            "total_days_booked": booked[prop.id],
            "period_days": days,
        }
        for prop in properties
    ]
