"""Decimal helpers shared by the split, balance and planning code."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from splitter.errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Tolerance for caller-provided sums (EXACT amounts, PERCENT percentages).
SUM_TOLERANCE = Decimal("0.01")
# Anything smaller than half a cent is rounding noise.
ZERO_THRESHOLD = Decimal("0.005")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their printed value, not their binary one
    return Decimal(str(value))


def to_money(value) -> Decimal:
    """Quantize to cents, half up."""
    try:
        return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Amount {value} is out of range")


def is_zero(value: Decimal) -> bool:
    return abs(value) < ZERO_THRESHOLD


def clean(value: Decimal) -> Decimal:
    """Quantize to cents and collapse rounding noise to exactly zero."""
    return ZERO if is_zero(value) else to_money(value)
