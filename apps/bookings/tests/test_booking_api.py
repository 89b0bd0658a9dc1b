"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings import services
from apps.bookings.models import Booking, DepositRecord
from apps.chalets.models import Chalet

User = get_user_model()


class BookingAPITests(APITestCase):
    """Covers создание, конфликты, подтверждение и отмену бронирований."""

    def setUp(self) -> None:
        self.owner = User.objects.create_user(username="owner", password="OwnerPass123")
        self.stranger = User.objects.create_user(username="stranger", password="StrangerPass123")
        self.staff = User.objects.create_user(username="staff", password="StaffPass123", is_staff=True)
        self.chalet = Chalet.objects.create(
            owner=self.owner,
            title_en="Sea View Chalet",
            price_per_night=Decimal("250.00"),
        )
        self.list_url = reverse("booking-list")
        self.check_in = date.today() + timedelta(days=10)

    def _payload(self, check_in: date, check_out: date, phone: str = "+96550000001") -> dict[str, object]:
        return {
            "chalet_id": self.chalet.id,
            "check_in": str(check_in),
            "check_out": str(check_out),
            "guest_phone": phone,
        }

    def _create(self, nights: int = 2, offset: int = 0) -> Booking:
        check_in = self.check_in + timedelta(days=offset)
        return services.create_booking(self.chalet.id, check_in, check_in + timedelta(days=nights), "+96550000001")

    def test_guest_can_create_booking_without_account(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(self.check_in, self.check_in + timedelta(days=3)),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "Pending")
        self.assertEqual(response.data["total_price"], "750.00")
        self.assertEqual(Booking.objects.count(), 1)

    def test_prevent_double_booking_on_overlap(self) -> None:
        first = self.client.post(
            self.list_url, self._payload(self.check_in, self.check_in + timedelta(days=2)), format="json"
        )
        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)

        conflict = self.client.post(
            self.list_url,
            self._payload(self.check_in + timedelta(days=1), self.check_in + timedelta(days=3), "+96550000002"),
            format="json",
        )

        self.assertEqual(conflict.status_code, status.HTTP_409_CONFLICT, conflict.data)
        self.assertEqual(conflict.data["code"], "conflict")

    def test_back_to_back_bookings_are_allowed(self) -> None:
        first = self.client.post(
            self.list_url, self._payload(self.check_in, self.check_in + timedelta(days=2)), format="json"
        )
        second = self.client.post(
            self.list_url,
            self._payload(self.check_in + timedelta(days=2), self.check_in + timedelta(days=4)),
            format="json",
        )

        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)
        self.assertEqual(second.status_code, status.HTTP_201_CREATED, second.data)
        self.assertEqual(Booking.objects.count(), 2)

    def test_invalid_range_returns_400(self) -> None:
        response = self.client.post(self.list_url, self._payload(self.check_in, self.check_in), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "invalid_range")

    def test_unknown_chalet_returns_404(self) -> None:
        payload = self._payload(self.check_in, self.check_in + timedelta(days=1))
        payload["chalet_id"] = 99999

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    def test_availability_endpoint(self) -> None:
        self._create(nights=3)
        url = reverse("booking-availability")

        free = self.client.get(url, {
            "chalet_id": self.chalet.id,
            "check_in": str(self.check_in + timedelta(days=3)),
            "check_out": str(self.check_in + timedelta(days=5)),
        })
        busy = self.client.get(url, {
            "chalet_id": self.chalet.id,
            "check_in": str(self.check_in + timedelta(days=2)),
            "check_out": str(self.check_in + timedelta(days=4)),
        })

        self.assertEqual(free.status_code, status.HTTP_200_OK, free.data)
        self.assertTrue(free.data["available"])
        self.assertFalse(busy.data["available"])

    def test_booked_dates_endpoint(self) -> None:
        self._create(nights=2)

        response = self.client.get(reverse("booking-booked-dates"), {"chalet_id": self.chalet.id})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            response.data["booked_dates"],
            [str(self.check_in), str(self.check_in + timedelta(days=1))],
        )

    def test_owner_can_confirm_booking(self) -> None:
        booking = self._create()
        self.client.force_authenticate(self.owner)

        response = self.client.post(
            reverse("booking-confirm", args=[booking.id]),
            {"deposit_amount": "250.00", "reference_number": "TRX-77"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "Confirmed")
        self.assertEqual(response.data["deposit_amount"], "250.00")
        self.assertEqual(DepositRecord.objects.get(booking_id=booking.id).recorded_by, self.owner)

    def test_confirm_cancelled_booking_returns_409(self) -> None:
        booking = self._create()
        services.cancel_booking(booking.id)
        self.client.force_authenticate(self.staff)

        response = self.client.post(
            reverse("booking-confirm", args=[booking.id]),
            {"deposit_amount": "250.00", "reference_number": "TRX-77"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["current_status"], "Cancelled")
        self.assertEqual(response.data["requested_status"], "Confirmed")
        self.assertFalse(DepositRecord.objects.exists())

    def test_owner_can_cancel_booking(self) -> None:
        booking = self._create()
        self.client.force_authenticate(self.owner)

        response = self.client.post(
            reverse("booking-cancel", args=[booking.id]), {"reason": "Изменились планы"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.CANCELLED.value)
        self.assertEqual(booking.cancellation_reason, "Изменились планы")

    def test_stranger_cannot_manage_booking(self) -> None:
        booking = self._create()
        self.client.force_authenticate(self.stranger)

        response = self.client.post(reverse("booking-cancel", args=[booking.id]), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PENDING.value)

    def test_anonymous_cannot_list(self) -> None:
        response = self.client.get(self.list_url)

        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_owner_lists_own_bookings_with_filters(self) -> None:
        pending = self._create()
        confirmed = self._create(offset=5)
        services.confirm_booking(confirmed.id, Decimal("250.00"), "TRX-1")
        other_chalet = Chalet.objects.create(owner=self.stranger, title_en="Desert Chalet")
        services.create_booking(other_chalet.id, self.check_in, self.check_in + timedelta(days=1), "+96550000009")
        self.client.force_authenticate(self.owner)

        everything = self.client.get(self.list_url, {"status": "all"})
        only_confirmed = self.client.get(self.list_url, {"status": "Confirmed"})

        self.assertEqual(everything.status_code, status.HTTP_200_OK, everything.data)
        self.assertEqual([b["id"] for b in everything.data], [pending.id, confirmed.id])
        self.assertEqual([b["id"] for b in only_confirmed.data], [confirmed.id])

    def test_list_rejects_unknown_status(self) -> None:
        self.client.force_authenticate(self.staff)

        response = self.client.get(self.list_url, {"status": "Expired"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_suggested_deposit(self) -> None:
        booking = self._create(nights=3)
        self.client.force_authenticate(self.owner)

        response = self.client.get(reverse("booking-suggested-deposit", args=[booking.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["suggested_deposit"], "250.00")

    def test_search_by_phone(self) -> None:
        booking = self._create()

        response = self.client.get(reverse("booking-search"), {"query": "+96550000001"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([b["id"] for b in response.data], [booking.id])

    def test_deposit_log_is_staff_only(self) -> None:
        booking = self._create()
        services.confirm_booking(booking.id, Decimal("250.00"), "TRX-1")
        url = reverse("booking-deposits")

        self.client.force_authenticate(self.owner)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.staff)
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data[0]["booking_reference"], booking.reference)
        self.assertEqual(response.data[0]["amount"], "250.00")
