from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.utils import timezone

from core.errors import NotFound
from core.identifiers import RandomSource, insert_with_unique_identifier
from core.storage import BOOKINGS, Storage

from .emails import send_booking_confirmation_email

logger = logging.getLogger(__name__)


def create_booking(
    storage: Storage,
    data: Dict[str, Any],
    *,
    source: Optional[RandomSource] = None,
) -> Dict[str, Any]:
    """Store a new booking under a freshly allocated booking code and confirm it."""

    record = {
        **data,
        "created_at": timezone.now(),
        "phone_verified": True,
    }
    booking = insert_with_unique_identifier(
        storage,
        BOOKINGS,
        record,
        field="booking_id",
        attempts=settings.BOOKING_ID_ATTEMPTS,
        length=settings.BOOKING_ID_LENGTH,
        source=source,
    )
    logger.info(
        "BOOKING CONFIRMATION: Dear %s, your booking with %s (ID: %s) has been confirmed!",
        booking["name"],
        settings.BAND_NAME,
        booking["booking_id"],
    )
    send_booking_confirmation_email(booking=booking)
    return booking


def find_bookings(
    storage: Storage,
    *,
    booking_id: str | None = None,
    contact_number: str | None = None,
) -> List[Dict[str, Any]]:
    if booking_id:
        return storage.find_many(BOOKINGS, {"booking_id": booking_id})
    if contact_number:
        return storage.find_many(BOOKINGS, {"phone": contact_number}, order_by=["-created_at"])
    raise ValueError("Either booking_id or contact_number is required")


def list_bookings(storage: Storage) -> List[Dict[str, Any]]:
    return storage.find_many(BOOKINGS, {}, order_by=["-created_at"])


def delete_booking(storage: Storage, booking_id: str) -> int:
    if not storage.exists_by_id(BOOKINGS, booking_id):
        raise NotFound("Booking not found")
    deleted = storage.delete_one(BOOKINGS, {"booking_id": booking_id})
    logger.info("Deleted booking %s", booking_id)
    return deleted


def start_of_today(now: datetime | None = None) -> datetime:
    local_now = timezone.localtime(now)
    return local_now.replace(hour=0, minute=0, second=0, microsecond=0)


def delete_past_bookings(storage: Storage, *, now: datetime | None = None) -> int:
    """Delete bookings whose event happened before today's local midnight."""

    cutoff = start_of_today(now)
    deleted = storage.delete_many(BOOKINGS, {"event_date__lt": cutoff})
    logger.info("Deleted %d bookings with events before %s", deleted, cutoff.isoformat())
    return deleted
