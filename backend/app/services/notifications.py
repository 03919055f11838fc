"""Booking notifications: compose templated messages and deliver them.

Delivery is simulated: the rendered message is written to the log. Callers
treat delivery as best effort; a failure here never undoes the booking.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from app.config import settings
from app.models.booking import Booking
from app.models.guest import Guest

logger = logging.getLogger(__name__)

TEMPLATES = {
    "booking_confirmation": {
        "subject": "New Booking Confirmation: {guest_name}",
        "body": (
            "A new booking has been created.\n\n"
            "Guest: {guest_name} ({guest_email})\n"
            "Check-in: {check_in}\n"
            "Check-out: {check_out}\n"
            "Total: ${price}\n"
        ),
    },
}


@dataclass(frozen=True)
class Notification:
    """A rendered message ready for delivery."""

    sender: str
    recipient: str
    subject: str
    body: str
    template: str


def _long_date(value: date) -> str:
    """e.g. ``Friday, March 1, 2024``."""
    return f"{value.strftime('%A')}, {value.strftime('%B')} {value.day}, {value.year}"


def _money(value: Decimal) -> str:
    return f"{value:,.2f}"


def compose_booking_confirmation(booking: Booking, guest: Guest, host_email: str) -> Notification:
    """Render the booking confirmation addressed to the host."""
    template_vars = {
        "guest_name": guest.name,
        "guest_email": guest.email,
        "check_in": _long_date(booking.check_in),
        "check_out": _long_date(booking.check_out),
        "price": _money(booking.price),
    }
    tmpl = TEMPLATES["booking_confirmation"]
    return Notification(
        sender=settings.notification_sender,
        recipient=host_email,
        subject=tmpl["subject"].format(**template_vars),
        body=tmpl["body"].format(**template_vars),
        template="booking_confirmation",
    )


def deliver(notification: Notification) -> str:
    """Send a notification. Returns the delivery status."""
    if not settings.notifications_enabled:
        logger.debug("Notifications disabled; skipping [%s] to %s", notification.template, notification.recipient)
        return "skipped"

    logger.info(
        "Notification sent [%s] to %s: %s",
        notification.template,
        notification.recipient,
        notification.subject,
    )
    return "simulated"


def send_booking_confirmation(booking: Booking, guest: Guest, host_email: str) -> str:
    """Compose and deliver a booking confirmation.

    Returns ``"simulated"``, ``"skipped"`` or ``"failed"``; never raises.
    """
    try:
        notification = compose_booking_confirmation(booking, guest, host_email)
        return deliver(notification)
    except Exception:
        logger.exception("Booking confirmation for booking %s failed", booking.id)
        return "failed"
