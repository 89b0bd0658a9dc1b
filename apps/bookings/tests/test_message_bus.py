"""Tests for event routing through the message bus."""

from __future__ import annotations

from django.test import SimpleTestCase

from apps.bookings.application.event_handlers import HANDLERS, register
from apps.bookings.domain.events import BookingCancelled, BookingCreated
from shared.application.message_bus import MessageBus


class MessageBusTests(SimpleTestCase):
    def test_failing_handler_does_not_stop_others(self) -> None:
        bus = MessageBus()
        seen: list[int | None] = []

        def broken(event):
            raise RuntimeError("smtp down")

        bus.register_event_handler(BookingCreated, broken)
        bus.register_event_handler(BookingCreated, lambda event: seen.append(event.aggregate_id))

        with self.assertLogs("shared.application.message_bus", level="ERROR"):
            bus.publish_events([BookingCreated(aggregate_id=1), BookingCreated(aggregate_id=2)])

        self.assertEqual(seen, [1, 2])

    def test_duplicate_registration_is_ignored(self) -> None:
        bus = MessageBus()
        calls: list[str] = []

        def handler(event):
            calls.append(event.reference)

        bus.register_event_handler(BookingCancelled, handler)
        bus.register_event_handler(BookingCancelled, handler)
        bus.publish_events([BookingCancelled(aggregate_id=3, reference="BK1")])

        self.assertEqual(calls, ["BK1"])

    def test_every_booking_event_has_a_handler(self) -> None:
        bus = MessageBus()
        register(bus)

        for event_type, handler in HANDLERS.items():
            with self.subTest(event=event_type.__name__):
                self.assertEqual(bus._event_handlers[event_type], [handler])
