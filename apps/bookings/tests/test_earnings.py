"""Tests for owner earnings totals and per-booking earnings lines."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings import services
from apps.bookings.domain.earnings import EarningsStatus, EarningsSummary, earnings_status
from apps.bookings.domain.filters import BookingFilters
from apps.bookings.domain.lifecycle import BookingStatus
from apps.chalets.models import Chalet

User = get_user_model()

NOW = datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)
TODAY = date(2025, 3, 15)


class EarningsStatusTests(SimpleTestCase):
    def test_buckets(self) -> None:
        self.assertEqual(earnings_status(BookingStatus.PENDING, date(2025, 3, 20), TODAY), EarningsStatus.PENDING)
        self.assertEqual(earnings_status("Confirmed", date(2025, 3, 20), TODAY), EarningsStatus.CONFIRMED)
        self.assertEqual(earnings_status("Confirmed", TODAY, TODAY), EarningsStatus.COMPLETED)
        self.assertIsNone(earnings_status(BookingStatus.CANCELLED, date(2025, 3, 20), TODAY))
        self.assertIsNone(earnings_status(BookingStatus.AUTO_CANCELLED, date(2025, 3, 20), TODAY))

    def test_summary_total_and_keys(self) -> None:
        summary = EarningsSummary(upcoming=Decimal("570.00"), completed=Decimal("855.00"), commission=Decimal("75.00"))

        self.assertEqual(summary.to_dict(), {
            "total_earnings": Decimal("1425.00"),
            "upcoming_earnings": Decimal("570.00"),
            "completed_earnings": Decimal("855.00"),
            "total_commission": Decimal("75.00"),
        })


@override_settings(BOOKINGS_PLATFORM_COMMISSION_RATE=Decimal("0.05"))
class EarningsServiceTests(TestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(username="owner", password="OwnerPass123")
        self.other_owner = User.objects.create_user(username="other", password="OtherPass123")
        self.chalet = Chalet.objects.create(owner=self.owner, title_en="Sea View Chalet", price_per_night=Decimal("300.00"))
        self.other = Chalet.objects.create(owner=self.other_owner, title_en="Desert Chalet", price_per_night=Decimal("100.00"))

        self.completed = self._book(self.chalet, "2025-03-02", "2025-03-05")
        self.cancelled = self._book(self.chalet, "2025-03-10", "2025-03-12")
        self.upcoming = self._book(self.chalet, "2025-03-20", "2025-03-22")
        self.pending = self._book(self.chalet, "2025-03-25", "2025-03-26")
        self.elsewhere = self._book(self.other, "2025-03-05", "2025-03-07")
        for booking in (self.completed, self.cancelled, self.upcoming, self.elsewhere):
            services.confirm_booking(booking.id, Decimal("100.00"), f"TRX-{booking.id}", now=NOW)
        services.cancel_booking(self.cancelled.id, now=NOW)

    def _book(self, chalet: Chalet, check_in: str, check_out: str):
        return services.create_booking(
            chalet.id,
            date.fromisoformat(check_in),
            date.fromisoformat(check_out),
            "+96550000001",
            now=NOW,
        )

    def test_owner_summary_counts_confirmed_bookings_only(self) -> None:
        summary = services.earnings_summary(self.owner.id, today=TODAY)

        self.assertEqual(summary.completed, Decimal("855.00"))
        self.assertEqual(summary.upcoming, Decimal("570.00"))
        self.assertEqual(summary.total, Decimal("1425.00"))
        self.assertEqual(summary.commission, Decimal("75.00"))

    def test_summary_without_owner_covers_every_chalet(self) -> None:
        summary = services.earnings_summary(today=TODAY)

        self.assertEqual(summary.completed, Decimal("1045.00"))
        self.assertEqual(summary.commission, Decimal("85.00"))

    def test_owner_without_bookings_earns_nothing(self) -> None:
        nobody = User.objects.create_user(username="nobody", password="NobodyPass123")

        self.assertEqual(services.earnings_summary(nobody.id, today=TODAY), EarningsSummary())

    def test_stay_ending_today_is_completed(self) -> None:
        summary = services.earnings_summary(self.owner.id, today=date(2025, 3, 22))

        self.assertEqual(summary.completed, Decimal("1425.00"))
        self.assertEqual(summary.upcoming, Decimal("0.00"))

    def test_details_list_live_bookings_with_net_figures(self) -> None:
        lines = list(services.earnings_details(BookingFilters(owner_id=self.owner.id), today=TODAY))

        self.assertEqual([line.id for line in lines], [self.completed.id, self.upcoming.id, self.pending.id])
        self.assertEqual(lines[0].commission_value, Decimal("45.00"))
        self.assertEqual(lines[0].net_earnings, Decimal("855.00"))
        self.assertEqual(lines[2].commission_value, Decimal("0.00"))
        self.assertEqual(lines[2].net_earnings, Decimal("300.00"))

    def test_details_filtered_by_bucket(self) -> None:
        owner_only = BookingFilters(owner_id=self.owner.id)

        completed = services.earnings_details(owner_only, status="Completed", today=TODAY)
        upcoming = services.earnings_details(owner_only, status=EarningsStatus.CONFIRMED, today=TODAY)
        pending = services.earnings_details(owner_only, status="Pending", today=TODAY)

        self.assertEqual([line.id for line in completed], [self.completed.id])
        self.assertEqual([line.id for line in upcoming], [self.upcoming.id])
        self.assertEqual([line.id for line in pending], [self.pending.id])

    def test_details_filtered_by_check_in_dates_and_chalet(self) -> None:
        window = BookingFilters(check_in_from=date(2025, 3, 5), check_in_to=date(2025, 3, 20))
        lines = services.earnings_details(window, today=TODAY)

        self.assertEqual([line.id for line in lines], [self.elsewhere.id, self.upcoming.id])
        other_only = services.earnings_details(BookingFilters(chalet_id=self.other.id), today=TODAY)
        self.assertEqual([line.id for line in other_only], [self.elsewhere.id])

    def test_unknown_bucket_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            services.earnings_details(status="Refunded", today=TODAY)


@override_settings(BOOKINGS_PLATFORM_COMMISSION_RATE=Decimal("0.05"))
class EarningsAPITests(APITestCase):
    """Доходы владельца: сводка и детализация по бронированиям."""

    def setUp(self) -> None:
        self.owner = User.objects.create_user(username="owner", password="OwnerPass123")
        self.stranger = User.objects.create_user(username="stranger", password="StrangerPass123")
        self.staff = User.objects.create_user(username="staff", password="StaffPass123", is_staff=True)
        self.chalet = Chalet.objects.create(
            owner=self.owner,
            title_en="Sea View Chalet",
            price_per_night=Decimal("250.00"),
        )
        self.details_url = reverse("booking-earnings")
        self.summary_url = reverse("booking-earnings-summary")

        today = date.today()
        self.completed = self._confirmed(today - timedelta(days=5), nights=3)
        self.upcoming = self._confirmed(today + timedelta(days=10), nights=2)
        self.pending = services.create_booking(
            self.chalet.id, today + timedelta(days=20), today + timedelta(days=21), "+96550000003"
        )

    def _confirmed(self, check_in: date, nights: int):
        booking = services.create_booking(self.chalet.id, check_in, check_in + timedelta(days=nights), "+96550000001")
        return services.confirm_booking(booking.id, Decimal("250.00"), f"TRX-{booking.id}")

    def test_owner_summary(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.get(self.summary_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data, {
            "total_earnings": "1187.50",
            "upcoming_earnings": "475.00",
            "completed_earnings": "712.50",
            "total_commission": "62.50",
        })

    def test_stranger_sees_no_earnings(self) -> None:
        self.client.force_authenticate(self.stranger)

        summary = self.client.get(self.summary_url)
        details = self.client.get(self.details_url)

        self.assertEqual(summary.data["total_earnings"], "0.00")
        self.assertEqual(details.status_code, status.HTTP_200_OK)
        self.assertEqual(details.data, [])

    def test_staff_sees_every_chalet(self) -> None:
        other = Chalet.objects.create(owner=self.stranger, title_en="Desert Chalet", price_per_night=Decimal("100.00"))
        check_in = date.today() + timedelta(days=3)
        booking = services.create_booking(other.id, check_in, check_in + timedelta(days=1), "+96550000009")
        services.confirm_booking(booking.id, Decimal("100.00"), "TRX-9")
        self.client.force_authenticate(self.staff)

        response = self.client.get(self.summary_url)

        self.assertEqual(response.data["upcoming_earnings"], "570.00")

    def test_details_lines(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.get(self.details_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            [line["booking_id"] for line in response.data],
            [self.completed.id, self.upcoming.id, self.pending.id],
        )
        first = response.data[0]
        self.assertEqual(first["chalet_name"], "Sea View Chalet")
        self.assertEqual(first["nights"], 3)
        self.assertEqual(first["total_price"], "750.00")
        self.assertEqual(first["commission"], "37.50")
        self.assertEqual(first["net_earnings"], "712.50")
        self.assertEqual(first["status"], "Completed")
        self.assertEqual([line["status"] for line in response.data[1:]], ["Confirmed", "Pending"])

    def test_details_filtered_by_status_and_dates(self) -> None:
        self.client.force_authenticate(self.owner)

        completed = self.client.get(self.details_url, {"status": "Completed"})
        future = self.client.get(self.details_url, {"from_date": str(date.today())})

        self.assertEqual([line["booking_id"] for line in completed.data], [self.completed.id])
        self.assertEqual([line["booking_id"] for line in future.data], [self.upcoming.id, self.pending.id])

    def test_details_reject_unknown_status(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.get(self.details_url, {"status": "Refunded"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inverted_dates_return_400(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.get(self.details_url, {"from_date": "2025-03-20", "to_date": "2025-03-10"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_anonymous_cannot_read_earnings(self) -> None:
        for url in (self.summary_url, self.details_url):
            response = self.client.get(url)
            self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
