"""Dashboard API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_current_host, get_db
from app.models.user import User
from app.schemas.booking import GuestBookingResponse, HostBookingResponse
from app.schemas.dashboard import GuestDashboard, HostDashboard
from app.services import dashboard_service

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])

_GUEST_LISTS = ("upcoming_trips", "past_trips", "pending_reviews")
_HOST_LISTS = ("pending_bookings", "upcoming_bookings", "recent_bookings", "pending_guest_reviews")


@router.get("/guest", response_model=GuestDashboard)
async def guest_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> GuestDashboard:
    data = await dashboard_service.get_guest_dashboard(db, current_user.id)
    for key in _GUEST_LISTS:
        data[key] = [GuestBookingResponse.model_validate(b) for b in data[key]]
    return GuestDashboard(**data)


@router.get("/host", response_model=HostDashboard)
async def host_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> HostDashboard:
    data = await dashboard_service.get_host_dashboard(db, current_user.id)
    for key in _HOST_LISTS:
        data[key] = [HostBookingResponse.model_validate(b) for b in data[key]]
    return HostDashboard(**data)
