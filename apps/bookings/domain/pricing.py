"""
Deposit and commission helpers

Both are advisory/derived figures. Prices themselves are opaque numbers
supplied by the chalet directory; nothing here computes a nightly rate.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def suggest_deposit(booking, chalet) -> Decimal:
    """
    Deposit to pre-fill in a confirmation prompt

    One night's price when the directory knows it, otherwise the booking
    total. ``confirm`` accepts any positive amount regardless.
    """
    nightly = getattr(chalet, "nightly_price", None) if chalet is not None else None
    if nightly:
        return Decimal(nightly)
    return Decimal(booking.total_price or 0)


def platform_commission(total_price, rate) -> Decimal | None:
    """Flat commission on the booking total; None when the rate is zero."""
    rate = Decimal(str(rate or 0))
    if rate <= 0:
        return None
    return (Decimal(total_price or 0) * rate).quantize(CENT, rounding=ROUND_HALF_UP)
