"""Decimal helpers for monetary amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Any

getcontext().prec = 28  # increase precision for financial calculations

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Convert ``value`` into a finite ``Decimal`` without passing through float.

    Strings may carry thousands separators (``"1,000.50"``). Floats are
    converted through ``str`` so ``0.1`` becomes ``Decimal("0.1")``.

    Raises
    ------
    ValueError
        If the value is not numeric, or is NaN or infinite.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            if isinstance(value, str):
                result = Decimal(value.strip().replace(",", ""))
            else:
                result = Decimal(str(value))
        except (InvalidOperation, TypeError) as exc:
            raise ValueError(f"Invalid numeric value: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Numeric value must be finite: {value!r}")
    return result


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
