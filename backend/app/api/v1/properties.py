"""Properties API routes: public search and detail, host-scoped listing management."""

import uuid
from collections.abc import Sequence
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_host, get_db
from app.models.property import Property
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.property import (
    HostPropertyListResponse,
    HostPropertyResponse,
    PropertyCreate,
    PropertyDetailResponse,
    PropertyListItem,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
)
from app.schemas.review import ReviewResponse
from app.services import property_service, review_service

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


async def build_list_items(db: AsyncSession, properties: Sequence[Property]) -> list[PropertyListItem]:
    """Attach rating aggregates to each property."""
    stats = await property_service.get_rating_stats(db, (p.id for p in properties))
    return [
        PropertyListItem.model_validate(p).model_copy(
            update={"average_rating": stats[p.id][0], "review_count": stats[p.id][1]}
        )
        for p in properties
    ]


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="Search active properties",
)
async def list_properties(
    city: str | None = Query(None),
    country: str | None = Query(None),
    property_type: str | None = Query(None, description="Case-insensitive, e.g. apartment"),
    min_price: Decimal | None = Query(None, ge=0),
    max_price: Decimal | None = Query(None, ge=0),
    bedrooms: int | None = Query(None, ge=0, description="Minimum bedrooms"),
    guests: int | None = Query(None, ge=1, description="Minimum capacity"),
    db: AsyncSession = Depends(get_db),
) -> PropertyListResponse:
    """Public search; every filter is optional and filters combine with AND."""
    properties = await property_service.search_properties(
        db,
        city=city,
        country=country,
        property_type=property_type,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        guests=guests,
    )
    items = await build_list_items(db, properties)
    return PropertyListResponse(items=items, total=len(items))


@router.get(
    "/my-listings",
    response_model=HostPropertyListResponse,
    summary="List the current host's active properties",
)
async def my_listings(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> HostPropertyListResponse:
    properties = await property_service.get_host_properties(db, current_user.id)
    items = await build_list_items(db, properties)
    counts = await property_service.count_active_bookings(db, (p.id for p in properties))
    return HostPropertyListResponse(
        items=[
            HostPropertyResponse(**item.model_dump(), active_booking_count=counts[item.id]) for item in items
        ],
        total=len(items),
    )


@router.get(
    "/{property_id}",
    response_model=PropertyDetailResponse,
    summary="Get an active property with its reviews",
)
async def get_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> PropertyDetailResponse:
    prop = await property_service.get_active_property(db, property_id)
    (item,) = await build_list_items(db, [prop])
    reviews = await review_service.get_property_reviews(db, property_id)
    return PropertyDetailResponse(
        **item.model_dump(),
        reviews=[ReviewResponse.model_validate(r) for r in reviews],
    )


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new property",
)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> PropertyResponse:
    """Create a property owned by the authenticated host."""
    data = body.model_dump()
    data["property_type"] = data["property_type"].capitalize()
    prop = await property_service.create_property(db, current_user.id, data)
    return PropertyResponse.model_validate(prop)


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update a property",
)
async def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> PropertyResponse:
    """Partially update a property. Only explicitly set fields are changed."""
    data = body.model_dump(exclude_unset=True)
    if data.get("property_type"):
        data["property_type"] = data["property_type"].capitalize()
    prop = await property_service.update_property(db, property_id, current_user.id, data)
    return PropertyResponse.model_validate(prop)


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    summary="Deactivate a property",
)
async def delete_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> MessageResponse:
    """Hide the listing from search. Existing bookings are kept."""
    await property_service.delete_property(db, property_id, current_user.id)
    return MessageResponse(message="Property deleted successfully")
