"""Immutable query criteria for listing bookings."""

from dataclasses import dataclass
from datetime import date

from apps.bookings.domain.exceptions import InvalidRange
from apps.bookings.domain.lifecycle import BookingStatus


@dataclass(frozen=True)
class BookingFilters:
    """
    Filters passed per call to the registry

    status=None means all statuses. ``check_in_from``/``check_in_to`` bound
    the check-in date inclusively on both ends. ``reference`` matches the
    numeric id exactly or the booking reference as a case-insensitive
    substring.
    """
    status: BookingStatus | None = None
    check_in_from: date | None = None
    check_in_to: date | None = None
    chalet_id: int | None = None
    reference: str | None = None
    phone: str | None = None
    owner_id: int | None = None

    def __post_init__(self):
        if self.status is not None:
            object.__setattr__(self, 'status', BookingStatus.parse(self.status))
        if self.check_in_from and self.check_in_to and self.check_in_from > self.check_in_to:
            raise InvalidRange(
                f"check_in_from ({self.check_in_from}) is after check_in_to ({self.check_in_to})"
            )
