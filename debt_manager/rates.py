"""Rate unit boundary.

Rates are stored the way users type them: as percentages (``0.1`` meaning
0.1 % per day, ``10`` meaning a 10 % penalty). The accrual calculator works
with fractions. :func:`percent_to_fraction` is the single place where a
stored rate is divided by 100; nothing downstream divides again.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from debt_manager.exceptions import ConfigurationError, FieldError, InvalidRateError
from debt_manager.models.enums import RateUnit
from debt_manager.money import to_decimal

HUNDRED = Decimal("100")
MAX_PERCENT = Decimal("100")


def percent_to_fraction(value: Any, field: str = "rate") -> Decimal:
    """Convert a percent-denominated rate into a fraction.

    Parameters
    ----------
    value : Any
        Rate in percent (``Decimal``, ``int``, ``float`` or numeric string).
    field : str
        Field name reported in the error.

    Returns
    -------
    Decimal
        ``value / 100``.

    Raises
    ------
    InvalidRateError
        If the value is not numeric or negative.
    """
    try:
        percent = to_decimal(value)
    except ValueError as exc:
        raise InvalidRateError(str(exc), [FieldError(field, "Must be a number")]) from exc
    if percent < 0:
        raise InvalidRateError(
            f"{field} cannot be negative: {percent}",
            [FieldError(field, "Cannot be negative")],
        )
    return percent / HUNDRED


def validate_percent(value: Decimal, field: str) -> Decimal:
    """Check a stored percent is within ``[0, 100]``."""
    if value < 0 or value > MAX_PERCENT:
        raise InvalidRateError(
            f"{field} must be between 0 and 100, got {value}",
            [FieldError(field, "Must be between 0 and 100")],
        )
    return value


def parse_percent(value: Any, field: str) -> Decimal:
    """Parse a stored percent, rejecting non-numeric and out of range values."""
    try:
        percent = to_decimal(value)
    except ValueError as exc:
        raise InvalidRateError(str(exc), [FieldError(field, "Must be a number")]) from exc
    return validate_percent(percent, field)


def parse_rate_unit(value: str | RateUnit) -> RateUnit:
    """Resolve a configured rate unit name (``day`` / ``month``)."""
    if isinstance(value, RateUnit):
        return value
    try:
        return RateUnit(str(value).strip().upper())
    except ValueError as exc:
        raise ConfigurationError(
            f"Unknown rate unit {value!r}; expected 'day' or 'month'"
        ) from exc
