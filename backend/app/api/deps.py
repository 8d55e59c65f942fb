"""Shared API dependencies, the single import point for all routers.

Re-exports database session and authentication dependencies so that router
modules can import everything they need from one place::

    from app.api.deps import get_db, get_current_active_user
"""

from fastapi import Request

from app.auth.dependencies import (
    get_current_active_user,
    get_current_host,
    get_current_user,
)
from app.database import get_db
from app.services.booking_service import BookingService


def get_booking_service(request: Request) -> BookingService:
    """The process-wide booking engine built at application startup."""
    return request.app.state.booking_service


__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "get_current_host",
    "get_booking_service",
]
