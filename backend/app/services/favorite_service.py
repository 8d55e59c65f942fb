"""Per-user saved properties."""

import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, NotFoundError
from app.models.favorite import Favorite
from app.models.property import Property
from app.services.property_service import get_active_property


async def _find(db: AsyncSession, user_id: uuid.UUID, property_id: uuid.UUID) -> Favorite | None:
    result = await db.execute(
        select(Favorite).where(Favorite.user_id == user_id, Favorite.property_id == property_id)
    )
    return result.scalar_one_or_none()


async def add_favorite(db: AsyncSession, user_id: uuid.UUID, property_id: uuid.UUID) -> Favorite:
    """Save a property for the user.

    The unique (user, property) constraint backs the existence check, so a
    concurrent duplicate also ends as a conflict.
    """
    await get_active_property(db, property_id)

    if await _find(db, user_id, property_id) is not None:
        raise ConflictError("Property already in favorites")

    favorite = Favorite(user_id=user_id, property_id=property_id)
    try:
        async with db.begin_nested():
            db.add(favorite)
    except IntegrityError:
        raise ConflictError("Property already in favorites") from None
    result = await db.execute(
        select(Favorite).where(Favorite.id == favorite.id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def remove_favorite(db: AsyncSession, user_id: uuid.UUID, property_id: uuid.UUID) -> None:
    favorite = await _find(db, user_id, property_id)
    if favorite is None:
        raise NotFoundError("Favorite not found")
    await db.delete(favorite)
    await db.flush()


async def get_favorite_properties(db: AsyncSession, user_id: uuid.UUID) -> Sequence[Property]:
    """Favorited properties, most recently saved first."""
    result = await db.execute(
        select(Property)
        .join(Favorite, Favorite.property_id == Property.id)
        .where(Favorite.user_id == user_id)
        .order_by(Favorite.created_at.desc())
    )
    return result.scalars().all()


async def is_favorited(db: AsyncSession, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
    return await _find(db, user_id, property_id) is not None
