"""
Booking Domain Errors

- InvalidRange: check-out is not after check-in
- BookingConflictError: requested dates overlap an active booking
- InvalidTransition: status change not allowed from the current state
- BookingNotFound: unknown booking (or chalet) id
- StorageFailure: the persistence layer failed
- InvalidBookingRequest: missing phone, non-positive deposit, empty payment reference
"""

from shared.domain.exceptions import DomainError


class BookingError(DomainError):
    """Base class for booking errors."""

    code = "booking_error"


class InvalidRange(BookingError):
    """Check-out date must be after check-in date."""

    code = "invalid_range"


class BookingConflictError(BookingError):
    """Chalet is not available for the requested dates."""

    code = "conflict"


class InvalidTransition(BookingError):
    """Requested status change is not permitted."""

    code = "invalid_transition"

    def __init__(self, current, requested, booking_id=None):
        self.current = current
        self.requested = requested
        self.booking_id = booking_id
        super().__init__(
            f"Cannot move booking {booking_id} from {current.value} to {requested.value}",
            current_status=current.value,
            requested_status=requested.value,
        )


class BookingNotFound(BookingError):
    """Booking does not exist."""

    code = "not_found"


class StorageFailure(BookingError):
    """Booking storage is unavailable."""

    code = "storage_failure"


class InvalidBookingRequest(BookingError):
    """Booking request is missing required data."""

    code = "invalid_request"
