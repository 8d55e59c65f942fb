"""RoomBnB: FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.auth import router as auth_router
from app.api.v1.bookings import router as bookings_router
from app.api.v1.dashboard import router as dashboard_router
from app.api.v1.earnings import router as earnings_router
from app.api.v1.favorites import router as favorites_router
from app.api.v1.guest_reviews import router as guest_reviews_router
from app.api.v1.properties import router as properties_router
from app.api.v1.reviews import router as reviews_router
from app.config import settings
from app.errors import register_error_handlers
from app.services.booking_service import BookingService
from app.services.booking_sweeper import BookingSweeper
from app.services.notifications import EmailNotifier, NotificationSink, NullNotifier

# Configure root logger so all app.* loggers output to stderr (captured by Docker).
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


def build_notifier() -> NotificationSink:
    if settings.notifications_enabled:
        return EmailNotifier(sender=settings.email_from)
    return NullNotifier()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    from app.database import async_session_factory, engine

    # Startup
    notifier = build_notifier()
    service = BookingService(notifier)
    app.state.notifier = notifier
    app.state.booking_service = service

    sweeper = BookingSweeper(service, async_session_factory, settings.booking_sweep_interval_seconds)
    if settings.booking_sweep_enabled:
        sweeper.start()
    app.state.booking_sweeper = sweeper

    yield

    # Shutdown: stop background work, flush pending emails, dispose engine connections
    await sweeper.stop()
    if isinstance(notifier, EmailNotifier):
        await notifier.drain()
    await engine.dispose()
    logger.info("%s shut down", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Vacation-rental marketplace API: listings, bookings, reviews and host earnings.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Available before startup too, e.g. under an ASGI transport that skips the lifespan
app.state.booking_service = BookingService(NullNotifier())

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routers
app.include_router(auth_router)
app.include_router(properties_router)
app.include_router(bookings_router)
app.include_router(favorites_router)
app.include_router(reviews_router)
app.include_router(guest_reviews_router)
app.include_router(earnings_router)
app.include_router(dashboard_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
