#!/usr/bin/env python3
"""
Duration token parsing for logged work.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

SINCE_LAST_WRITE = "s"

_HOURS = r"(\d+(?:\.\d+)?|\.\d+)h"
_MINUTES = r"(\d+)m"
HOURS_THEN_MINUTES = re.compile(rf"^(?:{_HOURS})?(?:{_MINUTES})?$")
MINUTES_THEN_HOURS = re.compile(rf"^{_MINUTES}{_HOURS}$")


class DurationUnavailableError(RuntimeError):
    """
    Raised when "since last write" is requested for a log never written.
    """


def _composite_minutes(hours: Optional[str], minutes: Optional[str]) -> int:
    total = int(round(float(hours) * 60)) if hours else 0
    if minutes:
        total += int(minutes)
    return total


def parse_duration(
    token: Optional[str],
    since_last_write: Optional[Callable[[], Optional[int]]] = None,
) -> Optional[int]:
    """
    Parse a duration token into whole minutes.

    Parameters
    ----------
    token : Optional[str]
        Duration text such as "1h30m", "45m", "2.5h", "90" or "s".
    since_last_write : Optional[Callable[[], Optional[int]]], optional
        Callback returning minutes since the log was last written, used
        for the "s" token. Returns None when the log was never written.

    Returns
    -------
    Optional[int]
        Minutes, 0 for an empty token, or None when the token is invalid.

    Raises
    ------
    DurationUnavailableError
        When "s" is given and the elapsed time cannot be determined.

    Examples
    --------
    >>> parse_duration("1h30m")
    90
    >>> parse_duration("30m1h")
    90
    >>> parse_duration("1.5h")
    90
    >>> parse_duration("90")
    90
    >>> parse_duration("")
    0
    >>> parse_duration("garbage") is None
    True
    >>> parse_duration("s", lambda: 12)
    12
    """
    if token is None:
        return 0
    text = token.strip().lower()
    if not text:
        return 0
    if text.isdigit():
        return int(text)
    if text == SINCE_LAST_WRITE:
        elapsed = since_last_write() if since_last_write else None
        if elapsed is None:
            raise DurationUnavailableError(
                "time since last entry is unavailable; the log has not been written yet"
            )
        return elapsed
    match = HOURS_THEN_MINUTES.match(text)
    if match and (match.group(1) or match.group(2)):
        return _composite_minutes(match.group(1), match.group(2))
    match = MINUTES_THEN_HOURS.match(text)
    if match:
        return _composite_minutes(match.group(2), match.group(1))
    return None


def looks_like_duration(token: str) -> bool:
    """
    Return True when a token would be accepted as a non-zero duration.

    The "s" sentinel is not considered a duration here; it is a plausible
    project name and resolving it would touch the log.

    Examples
    --------
    >>> looks_like_duration("2h")
    True
    >>> looks_like_duration("45")
    True
    >>> looks_like_duration("website")
    False
    >>> looks_like_duration("s")
    False
    """
    if token.strip().lower() == SINCE_LAST_WRITE:
        return False
    minutes = parse_duration(token)
    return bool(minutes)


def format_minutes(minutes: int) -> str:
    """
    Format minutes as a compact hours/minutes string.

    Examples
    --------
    >>> format_minutes(90)
    '1h30m'
    >>> format_minutes(45)
    '45m'
    >>> format_minutes(120)
    '2h'
    """
    hours, rest = divmod(int(minutes), 60)
    if not hours:
        return f"{rest}m"
    if not rest:
        return f"{hours}h"
    return f"{hours}h{rest}m"
