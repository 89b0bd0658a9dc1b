"""
Booking Event Handlers

Subscribed to the message bus in ``BookingsConfig.ready()``. Each handler
only enqueues a Celery notification task so that a slow or failing
notification never holds up a booking request.
"""

import logging

from apps.bookings.domain.events import (
    BookingAutoCancelled,
    BookingCancelled,
    BookingConfirmed,
    BookingCreated,
)
from shared.application.message_bus import MessageBus

logger = logging.getLogger(__name__)


def on_booking_created(event: BookingCreated):
    from apps.bookings.tasks import notify_booking_created

    notify_booking_created.delay(event.aggregate_id)


def on_booking_confirmed(event: BookingConfirmed):
    from apps.bookings.tasks import notify_booking_confirmed

    notify_booking_confirmed.delay(event.aggregate_id)


def on_booking_cancelled(event: BookingCancelled):
    from apps.bookings.tasks import notify_booking_cancelled

    notify_booking_cancelled.delay(event.aggregate_id)


def on_booking_auto_cancelled(event: BookingAutoCancelled):
    from apps.bookings.tasks import notify_booking_auto_cancelled

    notify_booking_auto_cancelled.delay(event.aggregate_id)


HANDLERS = {
    BookingCreated: on_booking_created,
    BookingConfirmed: on_booking_confirmed,
    BookingCancelled: on_booking_cancelled,
    BookingAutoCancelled: on_booking_auto_cancelled,
}


def register(bus: MessageBus):
    for event_type, handler in HANDLERS.items():
        bus.register_event_handler(event_type, handler)
    logger.debug(f"Registered {len(HANDLERS)} booking event handlers")
