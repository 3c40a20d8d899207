#!/usr/bin/env python3
"""
Resolve period keywords and range expressions into concrete date ranges.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .calendar_math import add_days, format_date, weekday_name, weekday_of
from .dates import is_absolute_date, parse_date

DEFAULT_PERIOD = "day"
PERIOD_KEYWORDS = (
    "day",
    "week",
    "w",
    "month",
    "mtd",
    "m",
    "year",
    "ytd",
    "y",
    "all",
    "a",
)

OFFSET_PATTERN = re.compile(r"^([+-])(\d+)$")
# Enough to reach any day-of-month from any starting day.
MAX_DAY_OF_MONTH_SCAN = 62


class PeriodError(ValueError):
    """
    Raised when a period keyword cannot be resolved at all.
    """


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive range of calendar days.

    Attributes
    ----------
    start : Optional[date]
        First day, or None when unbounded.
    end : Optional[date]
        Last day, or None when unbounded.
    """

    start: Optional[date]
    end: Optional[date]

    @property
    def unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True

    def __str__(self) -> str:
        if self.unbounded:
            return "all"
        start = format_date(self.start) if self.start else ""
        end = format_date(self.end) if self.end else ""
        if start == end:
            return start
        return f"{start}:{end}"


def _ordered(first: date, second: date) -> DateRange:
    if second < first:
        return DateRange(second, first)
    return DateRange(first, second)


def week_start_on_or_before(reference: date, week_start: int) -> date:
    """
    Return the latest ``week_start`` weekday on or before ``reference``.

    Raises
    ------
    PeriodError
        When no matching weekday is found within the preceding week.

    Examples
    --------
    >>> week_start_on_or_before(date(2024, 6, 12), 0)
    datetime.date(2024, 6, 9)
    >>> week_start_on_or_before(date(2024, 6, 12), 3)
    datetime.date(2024, 6, 12)
    """
    for back in range(7):
        candidate = add_days(reference, -back)
        if weekday_of(candidate) == week_start:
            return candidate
    raise PeriodError(
        f"could not find a {weekday_name(week_start)} on or before {format_date(reference)}"
    )


def month_range(reference: date) -> DateRange:
    """
    Return the full calendar month containing ``reference``.

    Examples
    --------
    >>> str(month_range(date(2024, 2, 15)))
    '2024-02-01:2024-02-29'
    >>> str(month_range(date(2023, 12, 5)))
    '2023-12-01:2023-12-31'
    """
    first = add_days(reference, -(reference.day - 1))
    if first.month == 12:
        next_first = date(first.year + 1, 1, 1)
    else:
        next_first = date(first.year, first.month + 1, 1)
    return DateRange(first, add_days(next_first, -1))


def _named_period(keyword: str, reference: date, week_start: int) -> Optional[DateRange]:
    if keyword == "day":
        return DateRange(reference, reference)
    if keyword in ("week", "w"):
        return DateRange(week_start_on_or_before(reference, week_start), reference)
    if keyword == "month":
        return month_range(reference)
    if keyword in ("mtd", "m"):
        return DateRange(add_days(reference, -(reference.day - 1)), reference)
    if keyword == "year":
        return DateRange(date(reference.year, 1, 1), date(reference.year, 12, 31))
    if keyword in ("ytd", "y"):
        day_of_year = reference.timetuple().tm_yday
        return DateRange(add_days(reference, -(day_of_year - 1)), reference)
    if keyword in ("all", "a"):
        return DateRange(None, None)
    return None


def _advance_to_day_of_month(start: date, day_of_month: int) -> Optional[date]:
    for step in range(MAX_DAY_OF_MONTH_SCAN):
        try:
            candidate = add_days(start, step)
        except OverflowError:
            return None
        if candidate.day == day_of_month:
            return candidate
    return None


def resolve_range_expression(
    expr: str,
    reference: date,
    now: Optional[datetime] = None,
) -> Optional[DateRange]:
    """
    Resolve an arbitrary ``A[:B]`` range expression.

    Parameters
    ----------
    expr : str
        Range expression. ``B`` may be "now", an absolute date, a
        day-of-month, or a signed day offset from ``A``.
    reference : date
        Day used for "now".
    now : Optional[datetime], optional
        Instant used for relative ``A`` forms such as "3d".

    Returns
    -------
    Optional[DateRange]
        Resolved range, or None when ``A`` or ``B`` cannot be interpreted.

    Examples
    --------
    >>> str(resolve_range_expression("2024-01-01:+10", date(2024, 6, 1)))
    '2024-01-01:2024-01-11'
    >>> str(resolve_range_expression("2024-01-11:-10", date(2024, 6, 1)))
    '2024-01-01:2024-01-11'
    >>> str(resolve_range_expression("2024-01-20:5", date(2024, 6, 1)))
    '2024-01-20:2024-02-05'
    >>> str(resolve_range_expression("2024-05-30:now", date(2024, 6, 1)))
    '2024-05-30:2024-06-01'
    >>> resolve_range_expression("nonsense", date(2024, 6, 1)) is None
    True
    """
    first_text, separator, second_text = expr.partition(":")
    first = parse_date(first_text, now)
    if first is None:
        return None
    if not separator:
        return DateRange(first, first)
    second_text = second_text.strip()
    if second_text.lower() == "now":
        return _ordered(first, reference)
    if is_absolute_date(second_text):
        second = parse_date(second_text, now)
        return _ordered(first, second) if second else None
    if second_text.isdigit():
        target = _advance_to_day_of_month(first, int(second_text))
        return DateRange(first, target) if target else None
    match = OFFSET_PATTERN.match(second_text)
    if match:
        offset = int(match.group(2))
        if match.group(1) == "-":
            offset = -offset
        try:
            second = add_days(first, offset)
        except OverflowError:
            return None
        return _ordered(first, second)
    return None


def resolve_period(
    period: Optional[str],
    reference: date,
    week_start: int = 0,
    now: Optional[datetime] = None,
) -> Optional[DateRange]:
    """
    Resolve a period keyword or range expression.

    Parameters
    ----------
    period : Optional[str]
        Period keyword (day/week/month/mtd/year/ytd/all and their short
        forms) or an arbitrary range expression. Empty means "day".
    reference : date
        Reference day; named periods end on or around it.
    week_start : int, optional
        Sunday-based index of the first day of a week (default: Sunday).
    now : Optional[datetime], optional
        Instant used for relative date forms.

    Returns
    -------
    Optional[DateRange]
        Resolved range, or None when the expression is not understood.

    Raises
    ------
    PeriodError
        When the week start cannot be located.

    Examples
    --------
    >>> str(resolve_period("month", date(2024, 2, 15)))
    '2024-02-01:2024-02-29'
    >>> str(resolve_period("mtd", date(2024, 3, 10)))
    '2024-03-01:2024-03-10'
    >>> str(resolve_period("week", date(2024, 6, 12)))
    '2024-06-09:2024-06-12'
    >>> str(resolve_period("ytd", date(2024, 3, 1)))
    '2024-01-01:2024-03-01'
    >>> resolve_period("all", date(2024, 3, 1)).unbounded
    True
    """
    keyword = (period or DEFAULT_PERIOD).strip().lower() or DEFAULT_PERIOD
    named = _named_period(keyword, reference, week_start)
    if named is not None:
        return named
    return resolve_range_expression(period.strip(), reference, now)
