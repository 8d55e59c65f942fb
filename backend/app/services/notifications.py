"""Booking lifecycle notifications.

The booking engine calls :meth:`NotificationSink.notify` once the transaction
holding a transition has committed.  Delivery is best effort and at most once: the email
notifier renders the message from a snapshot of the booking, schedules the
send on the running event loop and returns immediately.  A failed send is
logged and dropped; it never reaches the caller.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Protocol

from app.models.booking import Booking

logger = logging.getLogger(__name__)


class NotificationEvent(str, enum.Enum):
    BOOKING_REQUESTED = "booking_requested"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_REJECTED = "booking_rejected"
    BOOKING_CANCELLED_BY_GUEST = "booking_cancelled_by_guest"
    BOOKING_CANCELLED_BY_HOST = "booking_cancelled_by_host"


# Which party receives each event
_RECIPIENT = {
    NotificationEvent.BOOKING_REQUESTED: "host",
    NotificationEvent.BOOKING_CONFIRMED: "guest",
    NotificationEvent.BOOKING_REJECTED: "guest",
    NotificationEvent.BOOKING_CANCELLED_BY_GUEST: "host",
    NotificationEvent.BOOKING_CANCELLED_BY_HOST: "guest",
}

TEMPLATES = {
    NotificationEvent.BOOKING_REQUESTED: {
        "subject": "New Booking Request for {property_title}",
        "body": (
            "Hi {host_name},\n\n"
            "{guest_name} has requested to book {property_title}.\n\n"
            "- Check-in: {check_in}\n"
            "- Check-out: {check_out}\n"
            "- Guests: {number_of_guests}\n"
            "- Total: ${total_price}\n"
            "- Special requests: {special_requests}\n\n"
            "Please confirm or decline the request from your host dashboard."
        ),
    },
    NotificationEvent.BOOKING_CONFIRMED: {
        "subject": "Booking Confirmed - {property_title}",
        "body": (
            "Hi {guest_name},\n\n"
            "Good news! {host_name} confirmed your stay at {property_title} "
            "from {check_in} to {check_out}.\n\n"
            "Total: ${total_price}"
        ),
    },
    NotificationEvent.BOOKING_REJECTED: {
        "subject": "Booking Update - {property_title}",
        "body": (
            "Hi {guest_name},\n\n"
            "Unfortunately your request to stay at {property_title} "
            "from {check_in} to {check_out} was declined by the host."
        ),
    },
    NotificationEvent.BOOKING_CANCELLED_BY_GUEST: {
        "subject": "Booking Cancelled - {property_title}",
        "body": (
            "Hi {host_name},\n\n"
            "{guest_name} cancelled their booking at {property_title} "
            "({check_in} to {check_out}). The dates are available again."
        ),
    },
    NotificationEvent.BOOKING_CANCELLED_BY_HOST: {
        "subject": "Booking Cancelled - {property_title}",
        "body": (
            "Hi {guest_name},\n\n"
            "Your booking at {property_title} ({check_in} to {check_out}) "
            "was cancelled by the host."
        ),
    },
}


@dataclass(frozen=True)
class EmailMessage:
    sender: str
    recipient: str
    subject: str
    body: str


class NotificationSink(Protocol):
    """Receives lifecycle events. Implementations must never raise."""

    def notify(self, event: NotificationEvent, booking: Booking) -> None: ...


class NullNotifier:
    """Sink used when notifications are disabled."""

    def notify(self, event: NotificationEvent, booking: Booking) -> None:
        logger.debug("Notifications disabled, dropping %s for booking %s", event.value, booking.id)


def render_message(event: NotificationEvent, booking: Booking, sender: str) -> EmailMessage:
    """Render the email for ``event``.

    ``booking`` must have ``property.host`` and ``guest`` loaded.
    """
    prop = booking.property
    host = prop.host
    guest = booking.guest
    template_vars = {
        "property_title": prop.title,
        "host_name": host.first_name,
        "guest_name": f"{guest.first_name} {guest.last_name}",
        "check_in": booking.check_in.isoformat(),
        "check_out": booking.check_out.isoformat(),
        "number_of_guests": booking.number_of_guests,
        "total_price": booking.total_price,
        "special_requests": booking.special_requests or "none",
    }
    recipient = host.email if _RECIPIENT[event] == "host" else guest.email
    tmpl = TEMPLATES[event]
    return EmailMessage(
        sender=sender,
        recipient=recipient,
        subject=tmpl["subject"].format(**template_vars),
        body=tmpl["body"].format(**template_vars),
    )


class EmailNotifier:
    """Renders booking emails and sends them in the background.

    Actual SMTP delivery lives outside this service; :meth:`send` logs the
    message, which is what the default deployment relies on.
    """

    def __init__(self, sender: str) -> None:
        self.sender = sender
        self._pending: set[asyncio.Task[None]] = set()

    def notify(self, event: NotificationEvent, booking: Booking) -> None:
        try:
            # Render now: the ORM object may be expired once the request ends
            message = render_message(event, booking, self.sender)
            task = asyncio.get_running_loop().create_task(self._deliver(event, message))
        except Exception:
            logger.exception("Failed to queue %s notification for booking %s", event.value, booking.id)
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, event: NotificationEvent, message: EmailMessage) -> None:
        try:
            await self.send(message)
        except Exception:
            logger.exception("Failed to deliver %s notification to %s", event.value, message.recipient)

    async def send(self, message: EmailMessage) -> None:
        logger.info("Email [%s] to %s: %s", message.sender, message.recipient, message.subject)

    async def drain(self) -> None:
        """Wait for in-flight deliveries (used on shutdown)."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
