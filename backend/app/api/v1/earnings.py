"""Host earnings API router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_host, get_db
from app.models.user import User
from app.schemas.earnings import EarningsSummary, MonthlyEarnings, OccupancyData, PropertyEarnings
from app.services import earnings_service
from app.services.booking_service import utc_today

router = APIRouter(prefix="/api/v1/earnings", tags=["earnings"])


@router.get("/summary", response_model=EarningsSummary, summary="Earnings totals and month-over-month change")
async def get_summary(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> EarningsSummary:
    return EarningsSummary(**await earnings_service.get_summary(db, current_user.id))


@router.get("/monthly", response_model=list[MonthlyEarnings], summary="Earnings per month of a year")
async def get_monthly(
    year: int | None = Query(None, ge=2000, le=2100, description="Defaults to the current year"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> list[MonthlyEarnings]:
    rows = await earnings_service.get_monthly_earnings(db, current_user.id, year or utc_today().year)
    return [MonthlyEarnings(**row) for row in rows]


@router.get("/by-property", response_model=list[PropertyEarnings], summary="Earnings per property")
async def get_by_property(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> list[PropertyEarnings]:
    rows = await earnings_service.get_earnings_by_property(db, current_user.id)
    return [PropertyEarnings(**row) for row in rows]


@router.get("/occupancy", response_model=list[OccupancyData], summary="Occupancy rate per property")
async def get_occupancy(
    days: int = Query(90, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> list[OccupancyData]:
    rows = await earnings_service.get_occupancy_rates(db, current_user.id, days)
    return [OccupancyData(**row) for row in rows]
