"""
Tests for duration token parsing.
"""

from __future__ import annotations

import doctest

import pytest

import wlog.duration as duration


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("1h30m", 90),
        ("30m1h", 90),
        ("90", 90),
        ("45m", 45),
        ("2h", 120),
        ("1.5h", 90),
        ("2.5h", 150),
        (".5h", 30),
        ("1H30M", 90),
        ("  45m ", 45),
        ("0", 0),
    ],
)
@pytest.mark.unit
def test_parse_duration_accepts_both_orderings(token, expected):
    """
    Ensure hour/minute tokens parse in either order into whole minutes.

    Returns
    -------
    None
        This test asserts duration parsing.
    """
    assert duration.parse_duration(token) == expected


@pytest.mark.parametrize("token", ["", None, "   "])
@pytest.mark.unit
def test_parse_duration_empty_is_zero(token):
    """
    Ensure a missing duration reads as zero minutes.

    Returns
    -------
    None
        This test asserts the empty-token sentinel.
    """
    assert duration.parse_duration(token) == 0


@pytest.mark.parametrize(
    "token",
    ["garbage", "1.5m", "h", "m", "1h30", "30m1h30m", "1h 30m", "-5", "2d"],
)
@pytest.mark.unit
def test_parse_duration_rejects_invalid(token):
    """
    Ensure unrecognized tokens are invalid, not zero.

    Returns
    -------
    None
        This test asserts invalid token handling.
    """
    assert duration.parse_duration(token) is None


@pytest.mark.unit
def test_parse_duration_since_last_write_uses_callback():
    """
    Ensure "s" reports the minutes supplied by the log.

    Returns
    -------
    None
        This test asserts the since-last-write sentinel.
    """
    assert duration.parse_duration("s", lambda: 37) == 37
    assert duration.parse_duration("S", lambda: 0) == 0


@pytest.mark.unit
def test_parse_duration_since_last_write_unavailable():
    """
    Ensure "s" on an unwritten log raises instead of returning zero.

    Returns
    -------
    None
        This test asserts unavailable elapsed time.
    """
    with pytest.raises(duration.DurationUnavailableError):
        duration.parse_duration("s", lambda: None)
    with pytest.raises(duration.DurationUnavailableError):
        duration.parse_duration("s")


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("2h", True),
        ("45", True),
        ("30m1h", True),
        ("0", False),
        ("s", False),
        ("website", False),
        ("v2", False),
    ],
)
@pytest.mark.unit
def test_looks_like_duration(token, expected):
    """
    Ensure project tokens that parse as durations are flagged.

    Returns
    -------
    None
        This test asserts the argument-order heuristic.
    """
    assert duration.looks_like_duration(token) is expected


@pytest.mark.unit
def test_duration_doctest_examples():
    """
    Run doctest examples embedded in duration helpers.

    Returns
    -------
    None
        This test asserts doctest coverage for duration helpers.
    """
    results = doctest.testmod(duration)
    assert results.failed == 0
