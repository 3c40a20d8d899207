"""
Tests for single date expression parsing.
"""

from __future__ import annotations

import doctest
from datetime import date, datetime

import pytest

import wlog.dates as dates

NOW = datetime(2024, 6, 12, 9, 30)


@pytest.mark.parametrize(
    ("expr", "expected"),
    [
        ("2024-01-05", date(2024, 1, 5)),
        ("2024-1-5", date(2024, 1, 5)),
        ("1/5/2024", date(2024, 1, 5)),
        ("12/31/2023", date(2023, 12, 31)),
        ("Jan 5 2024", date(2024, 1, 5)),
        ("dec 31 2023", date(2023, 12, 31)),
        ("Feb 29, 2024", date(2024, 2, 29)),
        ("0d", date(2024, 6, 12)),
        ("1d", date(2024, 6, 11)),
        ("12d", date(2024, 5, 31)),
        ("2w", date(2024, 5, 29)),
    ],
)
@pytest.mark.unit
def test_parse_date_forms(expr, expected):
    """
    Ensure each accepted date form resolves to the right day.

    Returns
    -------
    None
        This test asserts date parsing.
    """
    assert dates.parse_date(expr, NOW) == expected


@pytest.mark.parametrize(
    "expr",
    [
        "",
        None,
        "today",
        "2024-13-01",
        "2023-02-29",
        "13/1/2024",
        "Foo 5 2024",
        "Jan 32 2024",
        "24-01-05",
        "3x",
        "2024/01/05",
        "99999999d",
        "999999999w",
    ],
)
@pytest.mark.unit
def test_parse_date_rejects_unparseable(expr):
    """
    Ensure unknown or impossible dates are unparseable.

    Returns
    -------
    None
        This test asserts rejection of bad dates.
    """
    assert dates.parse_date(expr, NOW) is None


@pytest.mark.parametrize("count", [1, 3, 10, 40])
@pytest.mark.unit
def test_relative_days_cross_daylight_saving(new_york_time, count):
    """
    Ensure "<N>d" stays exactly N calendar days back across DST.

    Returns
    -------
    None
        This test asserts relative dates near DST transitions.
    """
    now = datetime(2024, 3, 12, 0, 30)
    expected = date.fromordinal(date(2024, 3, 12).toordinal() - count)
    assert dates.parse_date(f"{count}d", now) == expected


@pytest.mark.unit
def test_relative_weeks_are_seven_days(new_york_time):
    """
    Ensure "<N>w" means 7N days back.

    Returns
    -------
    None
        This test asserts week offsets.
    """
    now = datetime(2024, 11, 5, 8, 0)
    assert dates.parse_date("1w", now) == date(2024, 10, 29)


@pytest.mark.unit
def test_relative_form_wins_over_others():
    """
    Ensure relative offsets are tried before absolute forms.

    Returns
    -------
    None
        This test asserts format priority.
    """
    pattern, extract = dates.DATE_FORMATS[0]
    assert extract is dates._relative
    assert pattern.match("7d")


@pytest.mark.unit
def test_is_absolute_date():
    """
    Ensure only absolute forms count as absolute dates.

    Returns
    -------
    None
        This test asserts absolute date detection.
    """
    assert dates.is_absolute_date("2024-01-05")
    assert dates.is_absolute_date("Jan 5 2024")
    assert not dates.is_absolute_date("3d")
    assert not dates.is_absolute_date("2024-02-30")


@pytest.mark.unit
def test_dates_doctest_examples():
    """
    Run doctest examples embedded in date helpers.

    Returns
    -------
    None
        This test asserts doctest coverage for date helpers.
    """
    results = doctest.testmod(dates)
    assert results.failed == 0
