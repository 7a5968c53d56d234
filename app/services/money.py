"""
Money helpers. Every stored amount is a Decimal rounded half-up to paise.
"""

from decimal import Decimal, ROUND_HALF_UP, ROUND_DOWN

CENTS = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """Coerce floats, ints and strings to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def percent_of(amount, percentage) -> Decimal:
    """percentage% of amount, rounded to 0.01."""
    return quantize_money(to_decimal(amount) * to_decimal(percentage) / HUNDRED)


def to_paise(amount) -> int:
    """Convert rupees to whole paise for payout APIs, never rounding up."""
    return int((to_decimal(amount) * HUNDRED).to_integral_value(rounding=ROUND_DOWN))
