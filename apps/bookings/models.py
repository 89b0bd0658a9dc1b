"""Booking persistence models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import DateRange

from .domain.lifecycle import BookingStatus


class Booking(models.Model):
    """Бронирование шале. Никогда не удаляется, отмена меняет только статус."""

    Status = BookingStatus
    # Set by the registry on status updates; not stored
    previous_status: BookingStatus | None = None

    chalet = models.ForeignKey(
        "chalets.Chalet",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    reference = models.CharField(max_length=20, unique=True, editable=False)
    guest_phone = models.CharField(
        max_length=32,
        help_text=_("Телефон гостя, используется как идентификатор гостя."),
    )
    check_in = models.DateField()
    check_out = models.DateField()
    status = models.CharField(
        max_length=16,
        choices=BookingStatus.choices(),
        default=BookingStatus.PENDING.value,
    )
    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    deposit_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    payment_reference = models.CharField(max_length=100, blank=True)
    commission_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    confirmed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    cancellation_reason = models.CharField(max_length=255, blank=True)

    class Meta:
        verbose_name = _("Бронирование")
        verbose_name_plural = _("Бронирования")
        ordering = ["check_in", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(status=BookingStatus.CONFIRMED.value, deposit_amount__isnull=False)
                    | (~models.Q(status=BookingStatus.CONFIRMED.value) & models.Q(deposit_amount__isnull=True))
                ),
                name="booking_deposit_iff_confirmed",
            ),
        ]
        indexes = [
            models.Index(fields=["chalet", "status", "check_in"], name="booking_chalet_status_idx"),
            models.Index(fields=["status", "created_at"], name="booking_status_created_idx"),
            models.Index(fields=["guest_phone"], name="booking_guest_phone_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.reference} for chalet {self.chalet_id}"

    @property
    def lifecycle_status(self) -> BookingStatus:
        return BookingStatus.parse(self.status)

    @property
    def dates(self) -> DateRange:
        return DateRange(self.check_in, self.check_out)

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days


class DepositRecord(models.Model):
    """Журнал внесённых депозитов (заполняется при подтверждении брони)."""

    booking = models.ForeignKey(Booking, on_delete=models.PROTECT, related_name="deposits")
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    reference_number = models.CharField(max_length=100)
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recorded_deposits",
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        verbose_name = _("Депозит")
        verbose_name_plural = _("Депозиты")
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"Deposit {self.amount} for {self.booking_id} ({self.reference_number})"
