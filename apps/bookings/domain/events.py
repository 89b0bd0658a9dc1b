"""
Booking Domain Events

Published after the surrounding transaction commits.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from shared.domain.base import DomainEvent


@dataclass
class BookingCreated(DomainEvent):
    """
    A new Pending booking was stored

    Triggers:
    - Notify the chalet owner about the new request
    """
    reference: str = ''
    chalet_id: int | None = None
    check_in: date | None = None
    check_out: date | None = None
    guest_phone: str = ''


@dataclass
class BookingConfirmed(DomainEvent):
    """
    Deposit recorded (PENDING -> CONFIRMED)

    Triggers:
    - Send confirmation to the guest
    """
    reference: str = ''
    deposit_amount: Decimal | None = None
    payment_reference: str = ''


@dataclass
class BookingCancelled(DomainEvent):
    """Booking cancelled by staff or owner (PENDING/CONFIRMED -> CANCELLED)"""
    reference: str = ''
    old_status: str = ''
    reason: str = ''


@dataclass
class BookingAutoCancelled(DomainEvent):
    """
    Stale hold reclaimed by the sweeper (PENDING -> AUTO_CANCELLED)

    Triggers:
    - Tell the guest the hold expired
    """
    reference: str = ''
    chalet_id: int | None = None
