"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain rules and the registry within transactions.

Commands:
- CreateBookingCommand: Create a new Pending booking
- ConfirmBookingCommand: Record a deposit and confirm
- CancelBookingCommand: Cancel a Pending or Confirmed booking
- AutoCancelSweepCommand: Reclaim stale Pending holds
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import logging

from django.utils import timezone

from apps.bookings.domain.availability import conflicting
from apps.bookings.domain.events import (
    BookingAutoCancelled,
    BookingCancelled,
    BookingConfirmed,
    BookingCreated,
)
from apps.bookings.domain.exceptions import (
    BookingConflictError,
    BookingNotFound,
    InvalidBookingRequest,
    InvalidRange,
    InvalidTransition,
)
from apps.bookings.domain.lifecycle import (
    AUTO_CANCEL_AFTER,
    BookingStatus,
    generate_reference,
    stale_cutoff,
)
from apps.bookings.domain.pricing import CENT, platform_commission
from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import DateRange

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    ``total_price`` overrides the directory quote when given.
    ``now`` is injected by tests; defaults to the current time.
    """
    chalet_id: int
    check_in: date
    check_out: date
    guest_phone: str
    total_price: Decimal | None = None
    now: datetime | None = None


@dataclass
class ConfirmBookingCommand:
    """Command to confirm a booking once a deposit has been received"""
    booking_id: int
    deposit_amount: Decimal
    reference_number: str
    confirmed_by: object = None
    now: datetime | None = None


@dataclass
class CancelBookingCommand:
    """Command to cancel a booking"""
    booking_id: int
    cancelled_by: object = None
    reason: str = ''
    now: datetime | None = None


@dataclass
class AutoCancelSweepCommand:
    """Command to expire stale holds; ``now`` is always explicit"""
    now: datetime


def _actor(user):
    """Only persist real accounts as audit actors."""
    if user is not None and getattr(user, "is_authenticated", False):
        return user
    return None


def _validate_range(check_in: date, check_out: date) -> DateRange:
    if check_in is None or check_out is None:
        raise InvalidRange("Check-in and check-out dates are required")
    if check_out <= check_in:
        raise InvalidRange(
            f"Check-out date ({check_out}) must be after check-in date ({check_in})",
            check_in=check_in.isoformat(),
            check_out=check_out.isoformat(),
        )
    return DateRange(check_in, check_out)


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    1. Validate the range and phone before touching storage
    2. Lock the chalet row so concurrent creations for it are serialized
    3. Check live bookings for overlap (half-open ranges)
    4. Insert the Pending booking with a fresh reference
    5. Publish BookingCreated after commit
    """

    def __init__(self, registry, directory):
        self.registry = registry
        self.directory = directory

    def handle(self, command: CreateBookingCommand):
        dates = _validate_range(command.check_in, command.check_out)
        phone = (command.guest_phone or '').strip()
        if not phone:
            raise InvalidBookingRequest("Guest phone number is required")
        if command.total_price is not None and Decimal(command.total_price) < 0:
            raise InvalidBookingRequest("Total price cannot be negative")

        now = command.now or timezone.now()

        logger.info(
            f"Creating booking for chalet {command.chalet_id}, "
            f"phone {phone}, dates {dates}"
        )

        with DjangoUnitOfWork() as uow:
            if not self.registry.lock_chalet(command.chalet_id):
                raise BookingNotFound(
                    f"Chalet {command.chalet_id} not found",
                    chalet_id=command.chalet_id,
                )

            overlapping = conflicting(dates, self.registry.live_ranges(command.chalet_id, window=dates))
            if overlapping:
                raise BookingConflictError(
                    f"Chalet {command.chalet_id} not available for dates {dates}. "
                    f"Found {len(overlapping)} overlapping booking(s).",
                    chalet_id=command.chalet_id,
                )

            total_price = command.total_price
            if total_price is None:
                total_price = self.directory.quote(command.chalet_id, dates.start_date, dates.end_date)

            booking = self.registry.insert(
                chalet_id=command.chalet_id,
                reference=generate_reference(now),
                guest_phone=phone,
                check_in=dates.start_date,
                check_out=dates.end_date,
                total_price=total_price or Decimal('0'),
                status=BookingStatus.PENDING.value,
                created_at=now,
            )

            uow.record(BookingCreated(
                aggregate_id=booking.id,
                reference=booking.reference,
                chalet_id=command.chalet_id,
                check_in=dates.start_date,
                check_out=dates.end_date,
                guest_phone=phone,
            ))

        logger.info(f"Booking created successfully: {booking.reference} (ID: {booking.id})")
        return booking


class ConfirmBookingHandler:
    """Handler for confirming a Pending booking with a deposit"""

    def __init__(self, registry, commission_rate=Decimal('0')):
        self.registry = registry
        self.commission_rate = commission_rate

    def handle(self, command: ConfirmBookingCommand):
        try:
            deposit = Decimal(str(command.deposit_amount)).quantize(CENT, rounding=ROUND_HALF_UP)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidBookingRequest("Deposit amount must be a number") from None
        if not deposit.is_finite() or deposit <= 0:
            raise InvalidBookingRequest("Deposit amount must be greater than zero")
        reference_number = (command.reference_number or '').strip()
        if not reference_number:
            raise InvalidBookingRequest("Payment reference number is required")

        now = command.now or timezone.now()
        actor = _actor(command.confirmed_by)

        logger.info(f"Confirming booking {command.booking_id} with deposit {deposit} ({reference_number})")

        with DjangoUnitOfWork() as uow:
            current = self.registry.get(command.booking_id)
            booking = self.registry.update_status(
                command.booking_id,
                BookingStatus.CONFIRMED,
                {
                    'deposit_amount': deposit,
                    'payment_reference': reference_number,
                    'commission_amount': platform_commission(current.total_price, self.commission_rate),
                    'confirmed_at': now,
                    'confirmed_by': actor,
                },
            )
            self.registry.record_deposit(booking, deposit, reference_number, recorded_by=actor)

            uow.record(BookingConfirmed(
                aggregate_id=booking.id,
                reference=booking.reference,
                deposit_amount=deposit,
                payment_reference=reference_number,
            ))

        logger.info(f"Booking {booking.reference} confirmed successfully")
        return booking


class CancelBookingHandler:
    """Handler for manual cancellation; authorization is the caller's job"""

    def __init__(self, registry):
        self.registry = registry

    def handle(self, command: CancelBookingCommand):
        now = command.now or timezone.now()
        logger.info(f"Cancelling booking {command.booking_id}, reason: {command.reason or '-'}")

        with DjangoUnitOfWork() as uow:
            booking = self.registry.update_status(
                command.booking_id,
                BookingStatus.CANCELLED,
                {
                    'deposit_amount': None,
                    'cancelled_at': now,
                    'cancelled_by': _actor(command.cancelled_by),
                    'cancellation_reason': command.reason or '',
                },
            )

            uow.record(BookingCancelled(
                aggregate_id=booking.id,
                reference=booking.reference,
                old_status=booking.previous_status.value,
                reason=command.reason or '',
            ))

        logger.info(f"Booking {booking.reference} cancelled successfully")
        return booking


class AutoCancelSweepHandler:
    """
    Handler for the auto-cancel sweep

    Every Pending booking whose hold is at least ``window`` old moves to
    AutoCancelled, one compare-and-set per booking. A booking confirmed or
    cancelled concurrently loses nothing: its InvalidTransition is logged
    and skipped, and the rest of the batch continues.
    """

    def __init__(self, registry, window: timedelta = AUTO_CANCEL_AFTER):
        self.registry = registry
        self.window = window

    def handle(self, command: AutoCancelSweepCommand) -> list[int]:
        cutoff = stale_cutoff(command.now, self.window)
        candidates = self.registry.stale_pending_ids(cutoff)
        swept: list[int] = []

        for booking_id in candidates:
            try:
                with DjangoUnitOfWork() as uow:
                    booking = self.registry.update_status(
                        booking_id,
                        BookingStatus.AUTO_CANCELLED,
                        {'cancelled_at': command.now},
                    )
                    uow.record(BookingAutoCancelled(
                        aggregate_id=booking.id,
                        reference=booking.reference,
                        chalet_id=booking.chalet_id,
                    ))
            except InvalidTransition as exc:
                logger.info(f"Skipping booking {booking_id} during auto-cancel sweep: {exc}")
                continue

            swept.append(booking_id)
            logger.info(f"Booking {booking.reference} auto-cancelled (created {booking.created_at})")

        if swept:
            logger.info(f"Auto-cancelled {len(swept)} stale pending bookings")
        return swept
