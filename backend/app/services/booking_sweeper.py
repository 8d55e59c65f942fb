"""Periodic promotion of expired confirmed bookings to ``completed``."""

import asyncio
import contextlib
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.services.booking_service import BookingService

logger = logging.getLogger(__name__)


class BookingSweeper:
    """Runs :meth:`BookingService.complete_expired_bookings` on a fixed interval.

    The first run happens as soon as :meth:`start` is called.  A failing run
    is logged and the loop waits for the next tick; the sweep is idempotent,
    so overlapping or repeated runs are harmless.
    """

    def __init__(
        self,
        service: BookingService,
        session_factory: async_sessionmaker[AsyncSession],
        interval_seconds: float = 3600,
    ) -> None:
        self.service = service
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        async with self.session_factory() as session:
            try:
                count = await self.service.complete_expired_bookings(session)
                await session.commit()
            except Exception:
                await session.rollback()
                raise
        logger.info("Expiry sweep marked %d bookings as completed", count)
        return count

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception:
                logger.exception("Expiry sweep failed; retrying in %ss", self.interval_seconds)
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self.running:
            return
        logger.info("Starting booking expiry sweeper (every %ss)", self.interval_seconds)
        self._task = asyncio.get_running_loop().create_task(self._loop(), name="booking-expiry-sweeper")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Booking expiry sweeper stopped")
