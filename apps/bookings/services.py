"""Booking operations exposed to views, tasks and management code."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Set

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from apps.chalets.directory import ChaletDirectory, DjangoChaletDirectory
from shared.domain.value_objects import DateRange

from .application.command_handlers import (
    AutoCancelSweepCommand,
    AutoCancelSweepHandler,
    CancelBookingCommand,
    CancelBookingHandler,
    ConfirmBookingCommand,
    ConfirmBookingHandler,
    CreateBookingCommand,
    CreateBookingHandler,
)
from .domain import availability
from .domain.earnings import EarningsStatus, EarningsSummary
from .domain.exceptions import InvalidRange
from .domain.filters import BookingFilters
from .domain.lifecycle import AUTO_CANCEL_AFTER
from .domain.pricing import suggest_deposit
from .infrastructure.registry import DjangoBookingRegistry

registry = DjangoBookingRegistry()
directory: ChaletDirectory = DjangoChaletDirectory()


def auto_cancel_window() -> timedelta:
    return getattr(settings, "BOOKINGS_AUTO_CANCEL_AFTER", AUTO_CANCEL_AFTER)


def commission_rate() -> Decimal:
    return Decimal(str(getattr(settings, "BOOKINGS_PLATFORM_COMMISSION_RATE", "0")))


def check_availability(chalet_id: int, check_in: date, check_out: date) -> bool:
    """Is [check_in, check_out) free of Pending/Confirmed bookings for the chalet?"""
    if check_out <= check_in:
        raise InvalidRange(f"Check-out date ({check_out}) must be after check-in date ({check_in})")
    requested = DateRange(check_in, check_out)
    return availability.is_available(requested, registry.live_ranges(chalet_id, window=requested))


def booked_dates(chalet_id: int, start: date | None = None, end: date | None = None) -> Set[date]:
    """Days blocked on the chalet calendar, optionally limited to [start, end)."""
    window = None
    if start is not None and end is not None:
        if end <= start:
            raise InvalidRange(f"Calendar end ({end}) must be after start ({start})")
        window = DateRange(start, end)
    return availability.booked_dates(registry.live_ranges(chalet_id, window=window), window=window)


def create_booking(
    chalet_id: int,
    check_in: date,
    check_out: date,
    guest_phone: str,
    *,
    total_price: Decimal | None = None,
    now: datetime | None = None,
):
    handler = CreateBookingHandler(registry, directory)
    return handler.handle(CreateBookingCommand(
        chalet_id=chalet_id,
        check_in=check_in,
        check_out=check_out,
        guest_phone=guest_phone,
        total_price=total_price,
        now=now,
    ))


def confirm_booking(
    booking_id: int,
    deposit_amount: Decimal,
    reference_number: str,
    *,
    confirmed_by=None,
    now: datetime | None = None,
):
    handler = ConfirmBookingHandler(registry, commission_rate=commission_rate())
    return handler.handle(ConfirmBookingCommand(
        booking_id=booking_id,
        deposit_amount=deposit_amount,
        reference_number=reference_number,
        confirmed_by=confirmed_by,
        now=now,
    ))


def cancel_booking(booking_id: int, *, cancelled_by=None, reason: str = "", now: datetime | None = None):
    handler = CancelBookingHandler(registry)
    return handler.handle(CancelBookingCommand(
        booking_id=booking_id,
        cancelled_by=cancelled_by,
        reason=reason,
        now=now,
    ))


def list_bookings(filters: BookingFilters | None = None):
    return registry.query(filters or BookingFilters())


def search_bookings(query: str):
    return registry.search(query)


def get_booking(booking_id: int):
    return registry.get(booking_id)


def suggested_deposit(booking) -> Decimal:
    return suggest_deposit(booking, directory.get_chalet(booking.chalet_id))


def deposit_log():
    return registry.deposits()


def run_auto_cancel_sweep(now: datetime) -> list[int]:
    """Expire stale Pending holds as of ``now``; returns the swept ids."""
    handler = AutoCancelSweepHandler(registry, window=auto_cancel_window())
    return handler.handle(AutoCancelSweepCommand(now=now))


def earnings_summary(owner_id: int | None = None, today: date | None = None) -> EarningsSummary:
    """Owner earnings totals; ``owner_id=None`` covers every chalet."""
    return registry.earnings_totals(owner_id, today or timezone.localdate())


def earnings_details(
    filters: BookingFilters | None = None,
    status: EarningsStatus | str | None = None,
    today: date | None = None,
):
    """Per-booking earnings lines for Pending and Confirmed bookings."""
    return registry.earnings_lines(
        filters or BookingFilters(),
        EarningsStatus(status) if status else None,
        today or timezone.localdate(),
    )
