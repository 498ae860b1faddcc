"""Fixed-precision decimal policy shared by every engine."""

from contextlib import AbstractContextManager
from decimal import ROUND_HALF_UP, Context, Decimal, localcontext

PRECISION = Context(prec=34, rounding=ROUND_HALF_UP)

# Anything at or below this magnitude is treated as zero.
ZERO_THRESHOLD = Decimal("1E-24")

ZERO = Decimal("0")
ONE = Decimal("1")


def is_negligible(value: Decimal) -> bool:
    """True when the value is effectively zero."""
    return abs(value) <= ZERO_THRESHOLD


def divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    return PRECISION.divide(numerator, denominator)


def precise() -> AbstractContextManager[Context]:
    """Enter the 34-digit, round-half-up arithmetic context."""
    return localcontext(PRECISION)


def to_plain(value: Decimal | int | None) -> str:
    """Render a number without exponent notation; empty string for None."""
    if value is None:
        return ""
    if isinstance(value, int):
        return str(value)
    return format(value, "f")
