"""
Base Domain Classes

Building blocks shared by the domain packages:
- ValueObject: Immutable objects compared by value
- DomainEvent: Events that represent something that happened
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DomainEvent:
    """
    Base class for domain events

    Domain events represent something that happened in the domain.
    They are collected during a unit of work and published after commit.
    """
    aggregate_id: int | None = None
    occurred_at: datetime = field(default_factory=_utcnow)
