"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from .models import Booking
from .services import run_auto_cancel_sweep

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (Celery Beat)
# ============================================================================

@shared_task(name="bookings.auto_cancel_stale_bookings")
def auto_cancel_stale_bookings() -> dict[str, int]:
    """
    Auto-cancel Pending bookings whose hold is older than the window.

    Scheduled by Celery Beat; the sweep itself takes the time explicitly,
    this task only supplies the current clock.

    Returns:
        dict: {"auto_cancelled": number of bookings moved to AutoCancelled}
    """
    swept = run_auto_cancel_sweep(timezone.now())
    return {"auto_cancelled": len(swept)}


# ============================================================================
# NOTIFICATION TASKS
# ============================================================================

def _load(booking_id: int) -> Booking | None:
    try:
        return Booking.objects.select_related("chalet", "chalet__owner").get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for notification")
        return None


@shared_task(name="bookings.notify_booking_created")
def notify_booking_created(booking_id: int) -> bool:
    """New booking request for the chalet owner."""
    booking = _load(booking_id)
    if booking is None:
        return False
    logger.info(
        f"[NOTIFICATION] New booking {booking.reference} for chalet {booking.chalet.title_en} "
        f"({booking.check_in:%d.%m.%Y} - {booking.check_out:%d.%m.%Y}) "
        f"to owner {booking.chalet.owner_id}"
    )
    return True


@shared_task(name="bookings.notify_booking_confirmed")
def notify_booking_confirmed(booking_id: int) -> bool:
    """Confirmation to the guest."""
    booking = _load(booking_id)
    if booking is None:
        return False
    logger.info(
        f"[NOTIFICATION] Booking {booking.reference} confirmed, deposit {booking.deposit_amount} "
        f"to guest {booking.guest_phone}"
    )
    return True


@shared_task(name="bookings.notify_booking_cancelled")
def notify_booking_cancelled(booking_id: int) -> bool:
    booking = _load(booking_id)
    if booking is None:
        return False
    logger.info(f"[NOTIFICATION] Booking {booking.reference} cancelled for guest {booking.guest_phone}")
    return True


@shared_task(name="bookings.notify_booking_auto_cancelled")
def notify_booking_auto_cancelled(booking_id: int) -> bool:
    """Hold expired without confirmation."""
    booking = _load(booking_id)
    if booking is None:
        return False
    logger.info(
        f"[NOTIFICATION] Booking {booking.reference} auto-cancelled after hold expiry "
        f"for guest {booking.guest_phone}"
    )
    return True
