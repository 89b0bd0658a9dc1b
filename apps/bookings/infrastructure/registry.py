"""
Booking Registry

The authoritative store of bookings. Every write the booking core makes
goes through here, so the atomic status update below is what keeps
confirm, cancel and the sweeper from overwriting each other.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List

from django.db import DatabaseError, transaction  # type: ignore
from django.db.models import DecimalField, ExpressionWrapper, F, Q, Sum, Value  # type: ignore
from django.db.models.functions import Coalesce  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.domain.earnings import ZERO, EarningsStatus, EarningsSummary
from apps.bookings.domain.exceptions import BookingNotFound, InvalidTransition, StorageFailure
from apps.bookings.domain.filters import BookingFilters
from apps.bookings.domain.lifecycle import BLOCKING_STATUSES, BookingStatus, ensure_transition
from apps.bookings.domain.pricing import CENT
from shared.domain.value_objects import DateRange

logger = logging.getLogger(__name__)


def _money() -> DecimalField:
    return DecimalField(max_digits=14, decimal_places=2)


class BookingRegistry(ABC):
    """Storage contract the lifecycle engine and the sweeper rely on."""

    @abstractmethod
    def insert(self, **fields):
        """Store a new booking and return it with its id assigned."""

    @abstractmethod
    def get(self, booking_id: int):
        """Return the booking or raise BookingNotFound."""

    @abstractmethod
    def update_status(self, booking_id: int, status: BookingStatus, extra_fields: dict | None = None):
        """
        Compare-and-set the status

        Reads the current status, validates the transition and writes the
        new status only if the row still has the status that was read.
        Raises BookingNotFound or InvalidTransition; the booking is
        unchanged in both cases. The returned booking carries the status
        it replaced in ``previous_status``.
        """

    @abstractmethod
    def query(self, filters: BookingFilters):
        """Bookings matching ``filters`` ordered by check-in, then id."""

    @abstractmethod
    def live_ranges(self, chalet_id: int, window: DateRange | None = None) -> List[DateRange]:
        """Date ranges of Pending/Confirmed bookings of the chalet."""

    @abstractmethod
    def stale_pending_ids(self, cutoff: datetime) -> List[int]:
        """Ids of Pending bookings created at or before ``cutoff``."""

    @abstractmethod
    def lock_chalet(self, chalet_id: int) -> bool:
        """Serialize writers for one chalet; False if the chalet is unknown."""


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


@contextmanager
def _storage(operation: str) -> Iterator[None]:
    try:
        yield
    except DatabaseError as exc:
        logger.error(f"Booking storage failed during {operation}: {exc}", exc_info=True)
        raise StorageFailure(f"Booking storage failed during {operation}") from exc


class DjangoBookingRegistry(BookingRegistry):
    """Registry over the ``Booking`` model."""

    def _model(self):
        from apps.bookings.models import Booking

        return Booking

    def _queryset(self):
        return self._model().objects.select_related("chalet")

    def insert(self, **fields):
        with _storage("insert"):
            booking = self._model().objects.create(**fields)
        logger.debug(f"Inserted booking {booking.id} ({booking.reference})")
        return booking

    def get(self, booking_id: int):
        with _storage("get"):
            booking = self._queryset().filter(pk=booking_id).first()
        if booking is None:
            raise BookingNotFound(f"Booking {booking_id} not found", booking_id=booking_id)
        return booking

    def update_status(self, booking_id: int, status: BookingStatus, extra_fields: dict | None = None):
        Booking = self._model()
        status = BookingStatus.parse(status)
        with _storage("update_status"), transaction.atomic():
            raw = (
                _lock_queryset_if_possible(Booking.objects.filter(pk=booking_id))
                .values_list("status", flat=True)
                .first()
            )
            if raw is None:
                raise BookingNotFound(f"Booking {booking_id} not found", booking_id=booking_id)

            current = BookingStatus.parse(raw)
            ensure_transition(current, status, booking_id=booking_id)

            changes = dict(extra_fields or {})
            changes["status"] = status.value
            changes["updated_at"] = timezone.now()
            updated = Booking.objects.filter(pk=booking_id, status=current.value).update(**changes)
            if updated == 0:
                # Another writer changed the status between our read and write
                latest = Booking.objects.filter(pk=booking_id).values_list("status", flat=True).first()
                raise InvalidTransition(BookingStatus.parse(latest), status, booking_id=booking_id)

            booking = self._queryset().get(pk=booking_id)
            booking.previous_status = current
            return booking

    def query(self, filters: BookingFilters):
        qs = self._queryset()
        if filters.status is not None:
            qs = qs.filter(status=filters.status.value)
        if filters.check_in_from is not None:
            qs = qs.filter(check_in__gte=filters.check_in_from)
        if filters.check_in_to is not None:
            qs = qs.filter(check_in__lte=filters.check_in_to)
        if filters.chalet_id is not None:
            qs = qs.filter(chalet_id=filters.chalet_id)
        if filters.phone:
            qs = qs.filter(guest_phone=filters.phone.strip())
        if filters.owner_id is not None:
            qs = qs.filter(chalet__owner_id=filters.owner_id)
        if filters.reference:
            qs = qs.filter(self._reference_q(filters.reference))
        return qs.order_by("check_in", "id")

    def search(self, query: str):
        """Bookings whose phone, id or reference matches a free-text query."""
        query = (query or "").strip()
        if not query:
            return self._queryset().none()
        condition = Q(guest_phone=query) | self._reference_q(query)
        return self._queryset().filter(condition).order_by("check_in", "id")

    @staticmethod
    def _reference_q(value: str) -> Q:
        value = value.strip().lstrip("#")
        condition = Q(reference__icontains=value)
        if value.isdigit():
            condition |= Q(pk=int(value))
        return condition

    def live_ranges(self, chalet_id: int, window: DateRange | None = None) -> List[DateRange]:
        qs = self._model().objects.filter(
            chalet_id=chalet_id,
            status__in=[status.value for status in BLOCKING_STATUSES],
        )
        if window is not None:
            qs = qs.filter(check_in__lt=window.end_date, check_out__gt=window.start_date)
        with _storage("live_ranges"):
            rows = list(qs.values_list("check_in", "check_out"))
        return [DateRange(check_in, check_out) for check_in, check_out in rows]

    def stale_pending_ids(self, cutoff: datetime) -> List[int]:
        qs = self._model().objects.filter(
            status=BookingStatus.PENDING.value,
            created_at__lte=cutoff,
        ).order_by("created_at", "id")
        with _storage("stale_pending_ids"):
            return list(qs.values_list("id", flat=True))

    def lock_chalet(self, chalet_id: int) -> bool:
        from apps.chalets.models import Chalet

        with _storage("lock_chalet"):
            locked = _lock_queryset_if_possible(Chalet.objects.filter(pk=chalet_id))
            return locked.values_list("pk", flat=True).first() is not None

    def record_deposit(self, booking, amount, reference_number: str, recorded_by=None):
        from apps.bookings.models import DepositRecord

        with _storage("record_deposit"):
            return DepositRecord.objects.create(
                booking=booking,
                amount=amount,
                reference_number=reference_number,
                recorded_by=recorded_by,
            )

    def deposits(self):
        from apps.bookings.models import DepositRecord

        return DepositRecord.objects.select_related("booking", "booking__chalet", "recorded_by")

    # ===== Earnings =====

    @staticmethod
    def _commission():
        return Coalesce("commission_amount", Value(ZERO, output_field=_money()), output_field=_money())

    def _net(self):
        return ExpressionWrapper(F("total_price") - self._commission(), output_field=_money())

    def earnings_lines(self, filters: BookingFilters, status: EarningsStatus | None, today):
        """
        Live bookings matching ``filters`` with ``commission_value`` and
        ``net_earnings`` annotations, optionally narrowed to one earnings bucket.
        """
        qs = self.query(filters).filter(status__in=[s.value for s in BLOCKING_STATUSES])
        if status is not None:
            status = EarningsStatus(status)
            if status is EarningsStatus.PENDING:
                qs = qs.filter(status=BookingStatus.PENDING.value)
            elif status is EarningsStatus.CONFIRMED:
                qs = qs.filter(status=BookingStatus.CONFIRMED.value, check_out__gt=today)
            else:
                qs = qs.filter(status=BookingStatus.CONFIRMED.value, check_out__lte=today)
        return qs.annotate(commission_value=self._commission(), net_earnings=self._net())

    def earnings_totals(self, owner_id: int | None, today) -> EarningsSummary:
        """Net earnings of Confirmed bookings split at ``today``, plus commission."""
        qs = self._model().objects.filter(status=BookingStatus.CONFIRMED.value)
        if owner_id is not None:
            qs = qs.filter(chalet__owner_id=owner_id)
        with _storage("earnings_totals"):
            totals = qs.aggregate(
                upcoming=Sum(self._net(), filter=Q(check_out__gt=today), output_field=_money()),
                completed=Sum(self._net(), filter=Q(check_out__lte=today), output_field=_money()),
                commission=Sum(self._commission(), output_field=_money()),
            )
        return EarningsSummary(
            upcoming=(totals["upcoming"] or ZERO).quantize(CENT),
            completed=(totals["completed"] or ZERO).quantize(CENT),
            commission=(totals["commission"] or ZERO).quantize(CENT),
        )
