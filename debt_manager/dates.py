"""Date helpers.

Only calendar dates matter for accrual; any time-of-day is dropped before
comparing.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime


def as_date(value: date | datetime) -> date:
    """Drop the time-of-day component, if any."""
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_date(value: str | date | datetime) -> date:
    """Parse an ISO date (``YYYY-MM-DD``), tolerating a trailing time part.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    if isinstance(value, (date, datetime)):
        return as_date(value)
    text = str(value).strip()
    try:
        if "T" in text or " " in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value!r}") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
