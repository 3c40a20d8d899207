#!/usr/bin/env python3
"""
Log entry records and per-project aggregation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .calendar_math import format_date

PROJECT_WIDTH = 12
DATE_PREFIX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?=\s|$)")


@dataclass(frozen=True)
class LogEntry:
    """
    One logged block of work.

    Attributes
    ----------
    day : date
        Day the work was done.
    project : str
        Project name (a single token).
    minutes : int
        Minutes spent.
    comment : str
        Free-form comment, possibly empty.
    """

    day: date
    project: str
    minutes: int
    comment: str = ""


@dataclass
class Aggregation:
    """
    Entries grouped by day plus per-day and grand project totals.

    Attributes
    ----------
    entries_by_date : Dict[date, List[LogEntry]]
        Entries per day, days in ascending order.
    by_date : Dict[date, Dict[str, int]]
        Project minutes per day, days in ascending order.
    totals : Dict[str, int]
        Project minutes across all days.
    """

    entries_by_date: Dict[date, List[LogEntry]] = field(default_factory=dict)
    by_date: Dict[date, Dict[str, int]] = field(default_factory=dict)
    totals: Dict[str, int] = field(default_factory=dict)

    @property
    def total_minutes(self) -> int:
        return sum(self.totals.values())


def collapse_comment(comment: Optional[str]) -> str:
    """
    Flatten a comment onto a single line.

    Examples
    --------
    >>> collapse_comment("fixed bug\\nwrote tests")
    'fixed bug. wrote tests'
    >>> collapse_comment(None)
    ''
    """
    if not comment:
        return ""
    return re.sub(r"\s*[\r\n]+\s*", ". ", comment.strip())


def format_entry_line(entry: LogEntry) -> str:
    """
    Format an entry as a fixed-width log line (without newline).

    Examples
    --------
    >>> format_entry_line(LogEntry(date(2024, 1, 5), "site", 45, "deploy"))
    '2024-01-05  site           45  deploy'
    """
    line = (
        f"{format_date(entry.day)}  {entry.project:<{PROJECT_WIDTH}}  "
        f"{entry.minutes:3d}  {collapse_comment(entry.comment)}"
    )
    return line.rstrip()


def leading_date(line: str) -> Optional[str]:
    """
    Return the leading ``YYYY-MM-DD`` token of a line, if any.

    Examples
    --------
    >>> leading_date("2024-01-05  site  45")
    '2024-01-05'
    >>> leading_date("# note") is None
    True
    """
    match = DATE_PREFIX.match(line)
    return match.group(0) if match else None


def parse_entry_line(line: str) -> Optional[LogEntry]:
    """
    Parse a log line into an entry.

    Parameters
    ----------
    line : str
        Raw log line.

    Returns
    -------
    Optional[LogEntry]
        Parsed entry, or None when the line is not a date/project/minutes
        record.

    Examples
    --------
    >>> parse_entry_line("2024-01-05  site          45  deploy prod")
    LogEntry(day=datetime.date(2024, 1, 5), project='site', minutes=45, comment='deploy prod')
    >>> parse_entry_line("2024-01-05  site  lots") is None
    True
    >>> parse_entry_line("# reset, abandoned 20 minutes") is None
    True
    """
    parts = line.strip().split(None, 3)
    if len(parts) < 3:
        return None
    match = DATE_PREFIX.match(parts[0])
    if not match or match.group(0) != parts[0]:
        return None
    if not parts[2].isdigit():
        return None
    try:
        day = date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None
    comment = parts[3].strip() if len(parts) > 3 else ""
    return LogEntry(day=day, project=parts[1], minutes=int(parts[2]), comment=comment)


def aggregate_entries(entries: Iterable[LogEntry]) -> Aggregation:
    """
    Group entries by day and total their minutes per project.

    Parameters
    ----------
    entries : Iterable[LogEntry]
        Entries in any order.

    Returns
    -------
    Aggregation
        Per-day listing, per-day subtotals and grand totals.
    """
    grouped: Dict[date, List[LogEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.day, []).append(entry)

    result = Aggregation()
    for day in sorted(grouped):
        day_entries = grouped[day]
        subtotal: Dict[str, int] = {}
        for entry in day_entries:
            subtotal[entry.project] = subtotal.get(entry.project, 0) + entry.minutes
        result.entries_by_date[day] = day_entries
        result.by_date[day] = subtotal
        for project, minutes in subtotal.items():
            result.totals[project] = result.totals.get(project, 0) + minutes
    return result


def aggregate_lines(lines_by_date: Mapping[str, Sequence[str]]) -> Aggregation:
    """
    Aggregate raw log lines, skipping lines that are not entry records.

    Parameters
    ----------
    lines_by_date : Mapping[str, Sequence[str]]
        Raw lines keyed by their leading date, as extracted from the log.

    Returns
    -------
    Aggregation
        Aggregated totals.

    Examples
    --------
    >>> result = aggregate_lines({
    ...     "2024-01-01": ["2024-01-01  proj  30", "2024-01-01  proj  15"],
    ...     "2024-01-02": ["2024-01-02  other  60", "2024-01-02  junk"],
    ... })
    >>> result.totals
    {'proj': 45, 'other': 60}
    """
    entries: List[LogEntry] = []
    for lines in lines_by_date.values():
        for line in lines:
            entry = parse_entry_line(line)
            if entry is not None:
                entries.append(entry)
    return aggregate_entries(entries)
