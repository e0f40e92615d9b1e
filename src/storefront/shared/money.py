"""Currency arithmetic on Decimal, rounded half-up to cents."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Coerce a float/str/int/Decimal amount to a two-place Decimal.

    Floats go through `str()` first so 0.1 stays 0.1 instead of its binary
    expansion.
    """
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        amount = Decimal(str(value))
    else:
        amount = Decimal(value)
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
