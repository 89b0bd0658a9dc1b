"""
Booking Lifecycle

Status finite state machine for a single booking.

State transitions:
- PENDING -> CONFIRMED      (deposit recorded by staff or owner)
- PENDING -> CANCELLED      (manual cancel)
- PENDING -> AUTO_CANCELLED (hold went stale, sweeper only)
- CONFIRMED -> CANCELLED    (manual cancel)

CONFIRMED, CANCELLED and AUTO_CANCELLED accept no further transitions
except CONFIRMED -> CANCELLED.
"""

from datetime import datetime, timedelta
from enum import Enum
from uuid import uuid4

from apps.bookings.domain.exceptions import InvalidTransition

# Pending holds older than this are reclaimed by the sweeper
AUTO_CANCEL_AFTER = timedelta(hours=4)


class BookingStatus(str, Enum):
    PENDING = 'Pending'
    CONFIRMED = 'Confirmed'
    CANCELLED = 'Cancelled'
    AUTO_CANCELLED = 'AutoCancelled'

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: 'str | BookingStatus') -> 'BookingStatus':
        """Strict construction; unknown status text raises ValueError."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(raw)
        except ValueError:
            raise ValueError(f"Unknown booking status: {raw!r}") from None

    @classmethod
    def choices(cls) -> list[tuple[str, str]]:
        return [(status.value, status.value) for status in cls]

    @property
    def is_terminal(self) -> bool:
        return self is not BookingStatus.PENDING

    @property
    def blocks_dates(self) -> bool:
        """Only live bookings hold inventory."""
        return self in BLOCKING_STATUSES


BLOCKING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})

TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({
        BookingStatus.CONFIRMED,
        BookingStatus.CANCELLED,
        BookingStatus.AUTO_CANCELLED,
    }),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.AUTO_CANCELLED: frozenset(),
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in TRANSITIONS[current]


def ensure_transition(current: BookingStatus, target: BookingStatus, booking_id=None) -> None:
    """Raise InvalidTransition unless current -> target is allowed."""
    if not can_transition(current, target):
        raise InvalidTransition(current, target, booking_id=booking_id)


def stale_cutoff(now: datetime, window: timedelta = AUTO_CANCEL_AFTER) -> datetime:
    """Holds created at or before the cutoff are stale."""
    return now - window


def generate_reference(now: datetime) -> str:
    """Human-readable booking reference: BK{YYYYMMDD}{random}"""
    return f"BK{now.strftime('%Y%m%d')}{uuid4().hex[:6].upper()}"
