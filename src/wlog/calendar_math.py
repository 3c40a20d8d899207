#!/usr/bin/env python3
"""
Calendar date primitives shared by the date parser and period resolver.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Union

WEEKDAYS = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

# Offset applied before projecting an instant back onto a calendar day, so a
# one hour daylight-saving shift at midnight stays on the intended day.
DAY_ANCHOR = timedelta(hours=12)

DateLike = Union[date, datetime]


def format_date(value: DateLike) -> str:
    """
    Format a date or local instant as ``YYYY-MM-DD``.

    Examples
    --------
    >>> format_date(date(2024, 3, 5))
    '2024-03-05'
    >>> format_date(datetime(2024, 12, 31, 23, 59))
    '2024-12-31'
    """
    return value.strftime("%Y-%m-%d")


def local_midnight(day: date) -> datetime:
    """
    Return local midnight of ``day`` as a timezone-aware instant.
    """
    return datetime.combine(day, time()).astimezone()


def to_instant(value: DateLike) -> datetime:
    """
    Return an aware instant for a date (local midnight) or datetime.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.astimezone()
    return local_midnight(value)


def add_days(value: DateLike, days: int) -> date:
    """
    Add whole days to a date or instant and return the resulting day.

    Instants are first reduced to their local calendar day. The day is
    anchored at local midnight, moved by whole 24 hour steps, and biased by
    twelve hours before it is converted back into local civil time.

    Parameters
    ----------
    value : DateLike
        Starting date or instant.
    days : int
        Number of days to add; negative values move backwards.

    Returns
    -------
    date
        Calendar day in local time.

    Examples
    --------
    >>> add_days(date(2024, 2, 28), 1)
    datetime.date(2024, 2, 29)
    >>> add_days(date(2024, 3, 1), -1)
    datetime.date(2024, 2, 29)
    >>> add_days(date(2023, 12, 31), 1)
    datetime.date(2024, 1, 1)
    """
    day = to_instant(value).astimezone().date()
    shifted = local_midnight(day) + timedelta(days=days) + DAY_ANCHOR
    return shifted.astimezone().date()


def weekday_of(day: date) -> int:
    """
    Return the Sunday-based weekday index (Sunday=0 .. Saturday=6).

    Examples
    --------
    >>> weekday_of(date(2024, 6, 9))
    0
    >>> weekday_of(date(2024, 6, 12))
    3
    """
    return (day.weekday() + 1) % 7


def weekday_index(name: Optional[str]) -> Optional[int]:
    """
    Resolve a weekday name or unique prefix to its Sunday-based index.

    Parameters
    ----------
    name : Optional[str]
        Weekday name or abbreviation, case-insensitive.

    Returns
    -------
    Optional[int]
        Index 0..6, or None when the prefix matches zero or several names.

    Examples
    --------
    >>> weekday_index("Tu")
    2
    >>> weekday_index("monday")
    1
    >>> weekday_index("T") is None
    True
    >>> weekday_index("x") is None
    True
    """
    if name is None:
        return None
    prefix = name.strip().lower()
    if not prefix:
        return None
    matches = [
        index
        for index, weekday in enumerate(WEEKDAYS)
        if weekday.lower().startswith(prefix)
    ]
    if len(matches) != 1:
        return None
    return matches[0]


def weekday_name(index: int, short: bool = False) -> str:
    """
    Return the weekday name for a Sunday-based index.

    Examples
    --------
    >>> weekday_name(0)
    'Sunday'
    >>> weekday_name(3, short=True)
    'Wed'
    """
    name = WEEKDAYS[index % 7]
    return name[:3] if short else name
