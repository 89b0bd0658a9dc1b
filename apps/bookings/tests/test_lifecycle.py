"""Unit tests for the booking status machine."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from django.test import SimpleTestCase

from apps.bookings.domain.exceptions import InvalidTransition
from apps.bookings.domain.lifecycle import (
    BLOCKING_STATUSES,
    BookingStatus,
    can_transition,
    ensure_transition,
    generate_reference,
    stale_cutoff,
)

ALLOWED = {
    (BookingStatus.PENDING, BookingStatus.CONFIRMED),
    (BookingStatus.PENDING, BookingStatus.CANCELLED),
    (BookingStatus.PENDING, BookingStatus.AUTO_CANCELLED),
    (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
}


class BookingStatusTests(SimpleTestCase):
    def test_transition_table_is_exactly_the_allowed_set(self) -> None:
        for current in BookingStatus:
            for target in BookingStatus:
                with self.subTest(current=current, target=target):
                    self.assertEqual(can_transition(current, target), (current, target) in ALLOWED)

    def test_disallowed_transition_raises_with_both_statuses(self) -> None:
        with self.assertRaises(InvalidTransition) as ctx:
            ensure_transition(BookingStatus.CANCELLED, BookingStatus.CONFIRMED, booking_id=5)

        error = ctx.exception
        self.assertEqual(error.current, BookingStatus.CANCELLED)
        self.assertEqual(error.requested, BookingStatus.CONFIRMED)
        self.assertEqual(error.booking_id, 5)
        self.assertEqual(error.to_dict()["current_status"], "Cancelled")
        self.assertEqual(error.to_dict()["requested_status"], "Confirmed")

    def test_auto_cancel_only_from_pending(self) -> None:
        with self.assertRaises(InvalidTransition):
            ensure_transition(BookingStatus.CONFIRMED, BookingStatus.AUTO_CANCELLED)

    def test_parse_is_strict(self) -> None:
        self.assertIs(BookingStatus.parse("AutoCancelled"), BookingStatus.AUTO_CANCELLED)
        with self.assertRaises(ValueError):
            BookingStatus.parse("Expired")
        with self.assertRaises(ValueError):
            BookingStatus.parse("pending")

    def test_only_live_statuses_block_dates(self) -> None:
        self.assertEqual(BLOCKING_STATUSES, {BookingStatus.PENDING, BookingStatus.CONFIRMED})
        self.assertFalse(BookingStatus.CANCELLED.blocks_dates)
        self.assertFalse(BookingStatus.AUTO_CANCELLED.blocks_dates)

    def test_pending_is_the_only_open_status(self) -> None:
        self.assertFalse(BookingStatus.PENDING.is_terminal)
        self.assertTrue(BookingStatus.CONFIRMED.is_terminal)
        self.assertTrue(BookingStatus.CANCELLED.is_terminal)
        self.assertTrue(BookingStatus.AUTO_CANCELLED.is_terminal)


class StalenessTests(SimpleTestCase):
    def setUp(self) -> None:
        self.created = datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)

    def test_hold_reaches_cutoff_exactly_at_window(self) -> None:
        self.assertLess(stale_cutoff(self.created + timedelta(hours=3, minutes=59, seconds=59)), self.created)
        self.assertEqual(stale_cutoff(self.created + timedelta(hours=4)), self.created)

    def test_cutoff_is_now_minus_window(self) -> None:
        now = datetime(2025, 3, 1, 14, 0, tzinfo=timezone.utc)
        self.assertEqual(stale_cutoff(now), self.created)
        self.assertEqual(stale_cutoff(now, timedelta(hours=1)), datetime(2025, 3, 1, 13, 0, tzinfo=timezone.utc))


class ReferenceTests(SimpleTestCase):
    def test_reference_format(self) -> None:
        reference = generate_reference(datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc))

        self.assertEqual(len(reference), 16)
        self.assertTrue(reference.startswith("BK20250310"))
        self.assertRegex(reference[10:], r"^[0-9A-F]{6}$")
