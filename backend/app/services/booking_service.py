"""Booking lifecycle engine.

Owns the booking state machine::

    pending ──confirm──▶ confirmed ──sweep──▶ completed
       │                     │
       ├──reject──▶ rejected │
       └──cancel──▶ cancelled ◀──cancel──┘

``rejected``, ``cancelled`` and ``completed`` are terminal.  Every operation is
a single read-check-write against the caller's session; the session is only
flushed here, committing is left to the request (or sweeper) that owns it.
Notifications are queued on the session and handed to the sink only once
that commit succeeds; a rollback discards them.

Availability uses an inclusive overlap rule: an existing pending/confirmed
booking conflicts when ``existing.check_in <= new.check_out`` and
``existing.check_out >= new.check_in``, so same-day turnover is refused.
Creation locks the property row first, which serializes concurrent requests
for the same property on databases that support ``SELECT ... FOR UPDATE``.
"""

import logging
import uuid
from collections.abc import Sequence
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import ColumnElement, and_, event, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, SessionTransaction

from app.errors import ConflictError, ForbiddenError, NotFoundError, ValidationFailedError
from app.models.booking import BLOCKING_STATUSES, Booking, BookingStatus
from app.models.property import Property
from app.services.notifications import NotificationEvent, NotificationSink

logger = logging.getLogger(__name__)

PENDING_NOTIFICATIONS_KEY = "pending_booking_notifications"


@event.listens_for(Session, "after_commit")
def _send_pending_notifications(session: Session) -> None:
    for notifier, event_kind, booking in session.info.pop(PENDING_NOTIFICATIONS_KEY, []):
        notifier.notify(event_kind, booking)


@event.listens_for(Session, "after_soft_rollback")
def _drop_pending_notifications(session: Session, previous_transaction: SessionTransaction) -> None:
    # A failed savepoint does not undo the enclosing transaction
    if not previous_transaction.nested:
        dropped = session.info.pop(PENDING_NOTIFICATIONS_KEY, [])
        if dropped:
            logger.info("Rollback discarded %d pending booking notification(s)", len(dropped))


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def count_nights(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


def calculate_total_price(prop: Property, check_in: date, check_out: date) -> Decimal:
    """``nights * price_per_night + cleaning_fee``, rounded to cents."""
    nights = count_nights(check_in, check_out)
    total = nights * Decimal(prop.price_per_night) + Decimal(prop.cleaning_fee or 0)
    return total.quantize(Decimal("0.01"))


class BookingService:
    """Stateless booking engine, built once per process and injected into routes."""

    def __init__(self, notifier: NotificationSink) -> None:
        self.notifier = notifier

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_booking(
        self,
        db: AsyncSession,
        *,
        guest_id: uuid.UUID,
        property_id: uuid.UUID,
        check_in: date,
        check_out: date,
        number_of_guests: int,
        special_requests: str | None = None,
    ) -> Booking:
        """Create a pending booking after availability and capacity checks.

        Raises:
            NotFoundError: The property does not exist or is inactive.
            ValidationFailedError: Bad date range or too many guests.
            ConflictError: The dates overlap a pending or confirmed booking.
        """
        # Row lock on the property serializes competing requests for it
        result = await db.execute(select(Property).where(Property.id == property_id).with_for_update())
        prop = result.scalar_one_or_none()
        if prop is None or not prop.is_active:
            raise NotFoundError("Property not found")

        if check_in >= check_out:
            raise ValidationFailedError("Check-out must be after check-in")

        if number_of_guests < 1:
            raise ValidationFailedError("At least 1 guest is required")

        if number_of_guests > prop.max_guests:
            raise ValidationFailedError(
                f"Maximum {prop.max_guests} guests allowed",
                detail={"max_guests": prop.max_guests},
            )

        if await self._has_conflict(db, property_id, check_in, check_out):
            raise ConflictError("Property not available for selected dates")

        booking = Booking(
            property_id=property_id,
            guest_id=guest_id,
            check_in=check_in,
            check_out=check_out,
            number_of_guests=number_of_guests,
            special_requests=special_requests,
            total_price=calculate_total_price(prop, check_in, check_out),
            status=BookingStatus.PENDING.value,
        )
        db.add(booking)
        await db.flush()

        booking = await self._load_booking(db, booking.id)
        logger.info("Booking %s created by guest %s for property %s", booking.id, guest_id, property_id)
        self._notify_after_commit(db, NotificationEvent.BOOKING_REQUESTED, booking)
        return booking

    async def cancel_booking(self, db: AsyncSession, booking_id: uuid.UUID, actor_id: uuid.UUID) -> Booking:
        """Cancel a pending or confirmed booking on behalf of its guest or host.

        The other party is notified.
        """
        booking = await self._get_booking_or_404(db, booking_id)

        if not self._is_party(booking, actor_id):
            raise ForbiddenError("Not authorized to cancel this booking")

        if booking.status == BookingStatus.CANCELLED.value:
            raise ConflictError("Booking already cancelled", detail={"status": booking.status})

        if booking.status not in BLOCKING_STATUSES:
            raise ConflictError(f"Cannot cancel {booking.status} booking", detail={"status": booking.status})

        booking = await self._set_status(db, booking, BookingStatus.CANCELLED)
        logger.info("Booking %s cancelled by %s", booking.id, actor_id)

        if actor_id == booking.guest_id:
            self._notify_after_commit(db, NotificationEvent.BOOKING_CANCELLED_BY_GUEST, booking)
        else:
            self._notify_after_commit(db, NotificationEvent.BOOKING_CANCELLED_BY_HOST, booking)
        return booking

    async def confirm_booking(self, db: AsyncSession, booking_id: uuid.UUID, host_id: uuid.UUID) -> Booking:
        booking = await self._get_pending_for_host(db, booking_id, host_id, action="confirm")
        booking = await self._set_status(db, booking, BookingStatus.CONFIRMED)
        logger.info("Booking %s confirmed by host %s", booking.id, host_id)
        self._notify_after_commit(db, NotificationEvent.BOOKING_CONFIRMED, booking)
        return booking

    async def reject_booking(self, db: AsyncSession, booking_id: uuid.UUID, host_id: uuid.UUID) -> Booking:
        booking = await self._get_pending_for_host(db, booking_id, host_id, action="reject")
        booking = await self._set_status(db, booking, BookingStatus.REJECTED)
        logger.info("Booking %s rejected by host %s", booking.id, host_id)
        self._notify_after_commit(db, NotificationEvent.BOOKING_REJECTED, booking)
        return booking

    async def complete_expired_bookings(self, db: AsyncSession, today: date | None = None) -> int:
        """Mark every confirmed booking whose check-out has passed as completed.

        A single conditional ``UPDATE``; running it again without newly
        expired bookings affects nothing and returns 0.  No notifications.
        """
        today = today or utc_today()
        result = await db.execute(
            update(Booking)
            .where(
                Booking.status == BookingStatus.CONFIRMED.value,
                Booking.check_out < today,
            )
            .values(status=BookingStatus.COMPLETED.value)
            .execution_options(synchronize_session=False)
        )
        await db.flush()
        return result.rowcount or 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_booking_by_id(self, db: AsyncSession, booking_id: uuid.UUID, actor_id: uuid.UUID) -> Booking:
        booking = await self._get_booking_or_404(db, booking_id)
        if not self._is_party(booking, actor_id):
            raise ForbiddenError("Not authorized to view this booking")
        return booking

    async def get_guest_bookings(self, db: AsyncSession, guest_id: uuid.UUID) -> Sequence[Booking]:
        result = await db.execute(
            select(Booking)
            .where(Booking.guest_id == guest_id)
            .order_by(Booking.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return result.scalars().all()

    async def get_host_bookings(self, db: AsyncSession, host_id: uuid.UUID) -> Sequence[Booking]:
        result = await db.execute(
            select(Booking)
            .join(Property, Booking.property_id == Property.id)
            .where(Property.host_id == host_id)
            .order_by(Booking.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return result.scalars().all()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _notify_after_commit(self, db: AsyncSession, event_kind: NotificationEvent, booking: Booking) -> None:
        db.info.setdefault(PENDING_NOTIFICATIONS_KEY, []).append((self.notifier, event_kind, booking))

    @staticmethod
    def _is_party(booking: Booking, actor_id: uuid.UUID) -> bool:
        return actor_id in (booking.guest_id, booking.property.host_id)

    @staticmethod
    async def _has_conflict(db: AsyncSession, property_id: uuid.UUID, check_in: date, check_out: date) -> bool:
        result = await db.execute(
            select(Booking.id)
            .where(
                Booking.property_id == property_id,
                Booking.status.in_(BLOCKING_STATUSES),
                Booking.check_in <= check_out,
                Booking.check_out >= check_in,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def _load_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking | None:
        # populate_existing refreshes server-side defaults and relationships
        result = await db.execute(
            select(Booking).where(Booking.id == booking_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _get_booking_or_404(self, db: AsyncSession, booking_id: uuid.UUID) -> Booking:
        booking = await self._load_booking(db, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    async def _get_pending_for_host(
        self, db: AsyncSession, booking_id: uuid.UUID, host_id: uuid.UUID, *, action: str
    ) -> Booking:
        booking = await self._get_booking_or_404(db, booking_id)
        if booking.property.host_id != host_id:
            raise ForbiddenError(f"Not authorized to {action} this booking")
        if booking.status != BookingStatus.PENDING.value:
            raise ConflictError(
                f"Cannot {action} booking with status '{booking.status}'",
                detail={"status": booking.status},
            )
        return booking

    async def _set_status(self, db: AsyncSession, booking: Booking, new_status: BookingStatus) -> Booking:
        booking.status = new_status.value
        await db.flush()
        return await self._load_booking(db, booking.id)


# ----------------------------------------------------------------------
# Finished-stay rules shared by reviews, earnings and dashboards
# ----------------------------------------------------------------------


def is_stay_finished(booking: Booking, today: date | None = None) -> bool:
    """Completed, or confirmed with a check-out the sweeper has not caught up with yet."""
    today = today or utc_today()
    if booking.status == BookingStatus.COMPLETED.value:
        return True
    return booking.status == BookingStatus.CONFIRMED.value and booking.check_out < today


def finished_stay_clause(today: date | None = None) -> ColumnElement[bool]:
    """SQL counterpart of :func:`is_stay_finished`."""
    today = today or utc_today()
    return or_(
        Booking.status == BookingStatus.COMPLETED.value,
        and_(Booking.status == BookingStatus.CONFIRMED.value, Booking.check_out < today),
    )
