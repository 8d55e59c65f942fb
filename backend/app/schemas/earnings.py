"""Pydantic v2 response schemas for host earnings endpoints."""

import uuid
from decimal import Decimal

from pydantic import BaseModel


class EarningsSummary(BaseModel):
    total_earnings: Decimal
    total_bookings: int
    completed_bookings: int
    average_booking_value: Decimal
    this_month_earnings: Decimal
    last_month_earnings: Decimal
    percentage_change: float


class MonthlyEarnings(BaseModel):
    month: int
    year: int
    earnings: Decimal
    bookings: int


class PropertyEarnings(BaseModel):
    property_id: uuid.UUID
    property_title: str
    property_image: str
    total_earnings: Decimal
    booking_count: int
    average_rating: float | None = None


class OccupancyData(BaseModel):
    property_id: uuid.UUID
    property_title: str
    occupancy_rate: float
    total_days_booked: int
    period_days: int
