"""
Owner Earnings

Read-only figures derived from stored bookings. Only Confirmed bookings
earn; a Confirmed booking whose stay has ended (check-out on or before
today) counts as Completed, the rest as Upcoming. Net earnings are the
booking total minus the stored platform commission.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from apps.bookings.domain.lifecycle import BookingStatus

ZERO = Decimal("0.00")


class EarningsStatus(str, Enum):
    PENDING = 'Pending'
    CONFIRMED = 'Confirmed'
    COMPLETED = 'Completed'

    def __str__(self) -> str:
        return self.value

    @classmethod
    def choices(cls) -> list[tuple[str, str]]:
        return [(status.value, status.value) for status in cls]


def earnings_status(status: BookingStatus, check_out: date, today: date) -> EarningsStatus | None:
    """Earnings bucket of a booking; None for cancelled bookings."""
    status = BookingStatus.parse(status)
    if status is BookingStatus.PENDING:
        return EarningsStatus.PENDING
    if status is BookingStatus.CONFIRMED:
        return EarningsStatus.COMPLETED if check_out <= today else EarningsStatus.CONFIRMED
    return None


@dataclass(frozen=True)
class EarningsSummary:
    upcoming: Decimal = ZERO
    completed: Decimal = ZERO
    commission: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.upcoming + self.completed

    def to_dict(self) -> dict:
        return {
            'total_earnings': self.total,
            'upcoming_earnings': self.upcoming,
            'completed_earnings': self.completed,
            'total_commission': self.commission,
        }
