"""Calendar-month arithmetic shared by the analytics components.

All helpers operate on :class:`datetime.date` values; there is no timezone
handling because transactions carry calendar dates only.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterator
from datetime import date

from .models import DateRange

# English names keep report labels independent of the process locale.
_MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Return ``(year, month)`` moved by ``delta`` calendar months."""

    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_range(year: int, month: int) -> DateRange:
    last_day = calendar.monthrange(year, month)[1]
    return DateRange(date(year, month, 1), date(year, month, last_day))


def year_range(year: int) -> DateRange:
    return DateRange(date(year, 1, 1), date(year, 12, 31))


def month_key(year: int, month: int) -> str:
    """``YYYY-MM`` label used for trend points and predictions."""

    return f"{year:04d}-{month:02d}"


def month_name(month: int) -> str:
    return _MONTH_NAMES[month - 1]


def month_abbr(month: int) -> str:
    return _MONTH_NAMES[month - 1][:3]


def trailing_window(today: date, months: int) -> DateRange:
    """Window covering ``months`` whole months before ``today``'s month plus the current one.

    Starts on the first day of the month ``months`` months back and ends on the
    last day of the current month. The current partial month is included and
    not prorated.
    """

    start_year, start_month = shift_month(today.year, today.month, -months)
    return DateRange(
        date(start_year, start_month, 1),
        month_range(today.year, today.month).end,
    )


def iter_months(span: DateRange) -> Iterator[tuple[int, int]]:
    """Yield ``(year, month)`` for every calendar month touched by ``span``."""

    year, month = span.start.year, span.start.month
    while (year, month) <= (span.end.year, span.end.month):
        yield year, month
        year, month = shift_month(year, month, 1)


def midpoint_ordinal(span: DateRange) -> float:
    """Temporal midpoint of ``span`` as a (possibly fractional) day ordinal."""

    return (span.start.toordinal() + span.end.toordinal()) / 2


__all__ = [
    "iter_months",
    "midpoint_ordinal",
    "month_abbr",
    "month_key",
    "month_name",
    "month_range",
    "shift_month",
    "trailing_window",
    "year_range",
]
