from __future__ import annotations

import logging
from smtplib import SMTPException
from typing import Any, Dict

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def _format_from_email() -> str:
    default_from = settings.DEFAULT_FROM_EMAIL
    email_addr = default_from
    if '<' in default_from and default_from.endswith('>'):
        email_addr = default_from.split('<', 1)[1].rstrip('>')
    return f"{settings.BAND_NAME} <{email_addr}>"


def send_booking_confirmation_email(*, booking: Dict[str, Any]) -> bool:
    """Mail the booking code to the customer; returns False if delivery failed."""

    subject = f"Your {settings.BAND_NAME} booking {booking['booking_id']} is confirmed"
    body_lines = [
        f"Dear {booking['name']},",
        "",
        f"Your booking with {settings.BAND_NAME} (ID: {booking['booking_id']}) has been confirmed!",
        f"Event date: {booking['event_date']:%B %d, %Y}",
        f"Venue: {booking['venue']}, {booking['city']}",
        f"Package: {booking['package_type']}",
        f"Amount: {booking['amount']} (advance paid: {booking['advance_payment']})",
        "",
        "Keep this booking ID handy; you can look up your booking with it or with your phone number.",
        "",
        "We look forward to making your event special.",
        f"The {settings.BAND_NAME} team",
    ]
    try:
        send_mail(
            subject,
            "\n".join(body_lines),
            _format_from_email(),
            [booking['email']],
            fail_silently=False,
        )
    except (SMTPException, OSError):
        logger.exception("Failed to send confirmation for booking %s", booking['booking_id'])
        return False
    return True
