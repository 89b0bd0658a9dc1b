"""
Availability Index

Pure rules for deciding whether a chalet is free for a date range.
All ranges are half-open: the check-in day is occupied, the check-out day
is not, so one guest can leave on the day the next one arrives.

The registry feeds these functions with the ranges of live
(Pending/Confirmed) bookings; cancelled bookings never reach them.
"""

from datetime import date
from typing import Iterable, Set

from shared.domain.value_objects import DateRange


def ranges_conflict(a: DateRange, b: DateRange) -> bool:
    return a.overlaps_with(b)


def is_available(requested: DateRange, booked: Iterable[DateRange]) -> bool:
    """True when ``requested`` overlaps none of the ``booked`` ranges."""
    return not any(ranges_conflict(requested, existing) for existing in booked)


def conflicting(requested: DateRange, booked: Iterable[DateRange]) -> list[DateRange]:
    return [existing for existing in booked if ranges_conflict(requested, existing)]


def booked_dates(
    booked: Iterable[DateRange],
    window: DateRange | None = None,
) -> Set[date]:
    """
    Every calendar day covered by the booked ranges

    If ``window`` is given only days inside it are returned.
    """
    days: Set[date] = set()
    for dates in booked:
        if window is not None and not dates.overlaps_with(window):
            continue
        for day in dates.days():
            if window is None or window.contains(day):
                days.add(day)
    return days
