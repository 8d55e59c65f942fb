"""Bookings API router.

Thin HTTP layer over :class:`~app.services.booking_service.BookingService`.
A booking is visible to, and cancellable by, its guest and the host of its
property; only the host confirms or rejects.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_booking_service, get_current_active_user, get_current_host, get_db
from app.models.user import User
from app.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    GuestBookingListResponse,
    GuestBookingResponse,
    HostBookingListResponse,
    HostBookingResponse,
    SweepResponse,
)
from app.services.booking_service import BookingService

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


@router.post(
    "",
    response_model=BookingDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a booking",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    service: BookingService = Depends(get_booking_service),
) -> BookingDetailResponse:
    """Create a pending booking for the current user and notify the host."""
    booking = await service.create_booking(
        db,
        guest_id=current_user.id,
        property_id=body.property_id,
        check_in=body.check_in,
        check_out=body.check_out,
        number_of_guests=body.number_of_guests,
        special_requests=body.special_requests,
    )
    return BookingDetailResponse.model_validate(booking)


@router.get(
    "/guest",
    response_model=GuestBookingListResponse,
    summary="List the current user's trips",
)
async def list_guest_bookings(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    service: BookingService = Depends(get_booking_service),
) -> GuestBookingListResponse:
    bookings = await service.get_guest_bookings(db, current_user.id)
    return GuestBookingListResponse(
        items=[GuestBookingResponse.model_validate(b) for b in bookings],
        total=len(bookings),
    )


@router.get(
    "/host",
    response_model=HostBookingListResponse,
    summary="List bookings on the current host's properties",
)
async def list_host_bookings(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
    service: BookingService = Depends(get_booking_service),
) -> HostBookingListResponse:
    bookings = await service.get_host_bookings(db, current_user.id)
    return HostBookingListResponse(
        items=[HostBookingResponse.model_validate(b) for b in bookings],
        total=len(bookings),
    )


@router.post(
    "/complete-expired",
    response_model=SweepResponse,
    summary="Complete confirmed bookings whose check-out has passed",
)
async def complete_expired_bookings(
    db: AsyncSession = Depends(get_db),
    _host: User = Depends(get_current_host),
    service: BookingService = Depends(get_booking_service),
) -> SweepResponse:
    """Run the expiry sweep on demand. Safe to call repeatedly."""
    count = await service.complete_expired_bookings(db)
    return SweepResponse(completed_count=count)


@router.get(
    "/{booking_id}",
    response_model=BookingDetailResponse,
    summary="Get a booking by ID",
)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    service: BookingService = Depends(get_booking_service),
) -> BookingDetailResponse:
    booking = await service.get_booking_by_id(db, booking_id, current_user.id)
    return BookingDetailResponse.model_validate(booking)


@router.put(
    "/{booking_id}/cancel",
    response_model=BookingDetailResponse,
    summary="Cancel a booking (guest or host)",
)
async def cancel_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    service: BookingService = Depends(get_booking_service),
) -> BookingDetailResponse:
    booking = await service.cancel_booking(db, booking_id, current_user.id)
    return BookingDetailResponse.model_validate(booking)


@router.put(
    "/{booking_id}/confirm",
    response_model=BookingDetailResponse,
    summary="Confirm a pending booking (host)",
)
async def confirm_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
    service: BookingService = Depends(get_booking_service),
) -> BookingDetailResponse:
    booking = await service.confirm_booking(db, booking_id, current_user.id)
    return BookingDetailResponse.model_validate(booking)


@router.put(
    "/{booking_id}/reject",
    response_model=BookingDetailResponse,
    summary="Reject a pending booking (host)",
)
async def reject_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
    service: BookingService = Depends(get_booking_service),
) -> BookingDetailResponse:
    booking = await service.reject_booking(db, booking_id, current_user.id)
    return BookingDetailResponse.model_validate(booking)
