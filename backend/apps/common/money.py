from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def _decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return ZERO
    return amount if amount.is_finite() else ZERO


def money(value: Any) -> Decimal:
    """Coerce ``value`` into a two-place Decimal, treating blanks and junk as zero."""
    return _decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round_units(value: Any) -> Decimal:
    """Round to whole currency units, halves away from zero.

    The unrounded value is used directly so ``0.495`` rounds down to ``0``.
    """
    return _decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP).quantize(CENT)


def positive_or(value: Any, fallback: Any) -> Decimal:
    amount = money(value)
    return amount if amount > 0 else money(fallback)
