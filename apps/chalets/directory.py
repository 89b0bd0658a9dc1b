"""
Chalet Directory

Read-only collaborator consumed by the booking engine. It returns the
handful of chalet fields the engine needs (identity, nightly price and
localized titles) and quotes an opaque total for a stay. The engine never
uses it for availability decisions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from shared.domain.value_objects import DateRange


@dataclass(frozen=True)
class ChaletRecord:
    id: int
    nightly_price: Decimal | None
    title_en: str = ""
    title_ar: str = ""

    def title(self, language: str = "en") -> str:
        if language.startswith("ar") and self.title_ar:
            return self.title_ar
        return self.title_en


class ChaletDirectory(ABC):
    """Lookup interface the booking engine depends on."""

    @abstractmethod
    def get_chalet(self, chalet_id: int) -> ChaletRecord | None:
        """Return the chalet record, or None when the id is unknown."""

    def quote(self, chalet_id: int, check_in: date, check_out: date) -> Decimal | None:
        """Total price for the stay, or None when the chalet is unknown."""
        chalet = self.get_chalet(chalet_id)
        if chalet is None:
            return None
        nights = len(DateRange(check_in, check_out))
        return (chalet.nightly_price or Decimal("0")) * nights


class DjangoChaletDirectory(ChaletDirectory):
    """Directory backed by the ``Chalet`` model."""

    def get_chalet(self, chalet_id: int) -> ChaletRecord | None:
        from .models import Chalet

        row = (
            Chalet.objects.filter(pk=chalet_id)
            .values("id", "price_per_night", "title_en", "title_ar")
            .first()
        )
        if row is None:
            return None
        return ChaletRecord(
            id=row["id"],
            nightly_price=row["price_per_night"],
            title_en=row["title_en"],
            title_ar=row["title_ar"],
        )
