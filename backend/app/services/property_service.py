"""Property directory: listing CRUD, search and rating aggregates."""

import logging
import uuid
from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ForbiddenError, NotFoundError
from app.models.booking import BLOCKING_STATUSES, Booking
from app.models.property import Property
from app.models.review import Review

logger = logging.getLogger(__name__)

RatingStats = tuple[float | None, int]


async def get_rating_stats(db: AsyncSession, property_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, RatingStats]:
    """Return ``{property_id: (average_rating, review_count)}``.

    Properties without reviews map to ``(None, 0)``.  Averages are rounded to
    one decimal.
    """
    ids = list(property_ids)
    stats: dict[uuid.UUID, RatingStats] = {pid: (None, 0) for pid in ids}
    if not ids:
        return stats

    result = await db.execute(
        select(Review.property_id, func.avg(Review.rating), func.count(Review.id))
        .where(Review.property_id.in_(ids))
        .group_by(Review.property_id)
    )
    for property_id, average, count in result.all():
        stats[property_id] = (round(float(average), 1), count)
    return stats


async def search_properties(
    db: AsyncSession,
    *,
    city: str | None = None,
    country: str | None = None,
    property_type: str | None = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
    bedrooms: int | None = None,
    guests: int | None = None,
) -> Sequence[Property]:
    """Active properties matching every given filter, newest first."""
    filters = [Property.is_active.is_(True)]
    if city:
        filters.append(Property.city.ilike(f"%{city}%"))
    if country:
        filters.append(Property.country.ilike(f"%{country}%"))
    if property_type:
        # Stored in Title Case, e.g. "APARTMENT" -> "Apartment"
        filters.append(Property.property_type == property_type.capitalize())
    if min_price is not None:
        filters.append(Property.price_per_night >= min_price)
    if max_price is not None:
        filters.append(Property.price_per_night <= max_price)
    if bedrooms is not None:
        filters.append(Property.bedrooms >= bedrooms)
    if guests is not None:
        filters.append(Property.max_guests >= guests)

    result = await db.execute(select(Property).where(*filters).order_by(Property.created_at.desc()))
    return result.scalars().all()


async def get_active_property(db: AsyncSession, property_id: uuid.UUID) -> Property:
    result = await db.execute(select(Property).where(Property.id == property_id, Property.is_active.is_(True)))
    prop = result.scalar_one_or_none()
    if prop is None:
        raise NotFoundError("Property not found")
    return prop


async def get_host_properties(db: AsyncSession, host_id: uuid.UUID) -> Sequence[Property]:
    result = await db.execute(
        select(Property)
        .where(Property.host_id == host_id, Property.is_active.is_(True))
        .order_by(Property.created_at.desc())
    )
    return result.scalars().all()


async def count_active_bookings(db: AsyncSession, property_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, int]:
    """Pending + confirmed bookings per property."""
    ids = list(property_ids)
    counts = {pid: 0 for pid in ids}
    if not ids:
        return counts
    result = await db.execute(
        select(Booking.property_id, func.count(Booking.id))
        .where(Booking.property_id.in_(ids), Booking.status.in_(BLOCKING_STATUSES))
        .group_by(Booking.property_id)
    )
    counts.update({property_id: count for property_id, count in result.all()})
    return counts


async def _reload(db: AsyncSession, property_id: uuid.UUID) -> Property:
    result = await db.execute(
        select(Property).where(Property.id == property_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def create_property(db: AsyncSession, host_id: uuid.UUID, data: dict[str, Any]) -> Property:
    prop = Property(host_id=host_id, **data)
    db.add(prop)
    await db.flush()
    logger.info("Host %s listed property %s", host_id, prop.id)
    return await _reload(db, prop.id)


async def _get_owned_property(db: AsyncSession, property_id: uuid.UUID, host_id: uuid.UUID, action: str) -> Property:
    prop = await db.get(Property, property_id)
    if prop is None:
        raise NotFoundError("Property not found")
    if prop.host_id != host_id:
        raise ForbiddenError(f"Not authorized to {action} this property")
    return prop


async def update_property(
    db: AsyncSession, property_id: uuid.UUID, host_id: uuid.UUID, data: dict[str, Any]
) -> Property:
    """Apply a partial update.

    Existing bookings keep the ``total_price`` computed when they were made.
    """
    prop = await _get_owned_property(db, property_id, host_id, "update")
    for field, value in data.items():
        setattr(prop, field, value)
    await db.flush()
    return await _reload(db, prop.id)


async def delete_property(db: AsyncSession, property_id: uuid.UUID, host_id: uuid.UUID) -> None:
    """Soft-delete: the listing disappears from search but its bookings remain."""
    prop = await _get_owned_property(db, property_id, host_id, "delete")
    prop.is_active = False
    await db.flush()
    logger.info("Host %s deactivated property %s", host_id, property_id)
