#!/usr/bin/env python3
"""
Parse single date expressions into calendar dates.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Callable, List, Optional, Tuple

from .calendar_math import add_days

MONTH_ABBREVIATIONS = (
    "jan",
    "feb",
    "mar",
    "apr",
    "may",
    "jun",
    "jul",
    "aug",
    "sep",
    "oct",
    "nov",
    "dec",
)

Extractor = Callable[[re.Match, datetime], Optional[date]]


def _calendar_day(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _relative(match: "re.Match[str]", now: datetime) -> Optional[date]:
    count = int(match.group(1))
    if match.group(2).lower() == "w":
        count *= 7
    try:
        return add_days(now, -count)
    except OverflowError:
        return None


def _iso(match: "re.Match[str]", _now: datetime) -> Optional[date]:
    year, month, day = (int(part) for part in match.groups())
    return _calendar_day(year, month, day)


def _us(match: "re.Match[str]", _now: datetime) -> Optional[date]:
    month, day, year = (int(part) for part in match.groups())
    return _calendar_day(year, month, day)


def _month_name(match: "re.Match[str]", _now: datetime) -> Optional[date]:
    abbreviation = match.group(1).lower()
    if abbreviation not in MONTH_ABBREVIATIONS:
        return None
    month = MONTH_ABBREVIATIONS.index(abbreviation) + 1
    return _calendar_day(int(match.group(3)), month, int(match.group(2)))


# Tried in order; the first pattern that matches decides the result.
DATE_FORMATS: List[Tuple[re.Pattern, Extractor]] = [
    (re.compile(r"^(\d+)([dw])$", re.IGNORECASE), _relative),
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$"), _iso),
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), _us),
    (re.compile(r"^([A-Za-z]{3})\s+(\d{1,2}),?\s+(\d{4})$"), _month_name),
]


def parse_date(expr: Optional[str], now: Optional[datetime] = None) -> Optional[date]:
    """
    Parse a date expression.

    Parameters
    ----------
    expr : Optional[str]
        One of "<N>d", "<N>w", "YYYY-M-D", "M/D/YYYY" or "Mon D YYYY".
    now : Optional[datetime], optional
        Reference instant for relative offsets (default: current time).

    Returns
    -------
    Optional[date]
        Parsed date, or None when no form matches or the day is not real.

    Examples
    --------
    >>> parse_date("2024-1-5")
    datetime.date(2024, 1, 5)
    >>> parse_date("1/5/2024")
    datetime.date(2024, 1, 5)
    >>> parse_date("Jan 5 2024")
    datetime.date(2024, 1, 5)
    >>> parse_date("3d", datetime(2024, 3, 2, 9, 0))
    datetime.date(2024, 2, 28)
    >>> parse_date("1w", datetime(2024, 1, 3, 9, 0))
    datetime.date(2023, 12, 27)
    >>> parse_date("2023-02-29") is None
    True
    >>> parse_date("yesterday") is None
    True
    """
    if expr is None:
        return None
    text = expr.strip()
    if not text:
        return None
    reference = now or datetime.now()
    for pattern, extract in DATE_FORMATS:
        match = pattern.match(text)
        if match:
            return extract(match, reference)
    return None


def is_absolute_date(expr: str) -> bool:
    """
    Return True when ``expr`` is an absolute (non-relative) date.

    Examples
    --------
    >>> is_absolute_date("2024-01-05")
    True
    >>> is_absolute_date("5d")
    False
    """
    text = expr.strip()
    for pattern, extract in DATE_FORMATS[1:]:
        match = pattern.match(text)
        if match:
            return extract(match, datetime.now()) is not None
    return False
