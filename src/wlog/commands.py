#!/usr/bin/env python3
"""
Command implementations behind the wlog CLI.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from datetime import date, datetime
from typing import List, Optional, Sequence

from .aggregate import LogEntry, aggregate_lines
from .calendar_math import format_date
from .config import Settings
from .dates import parse_date
from .duration import (
    DurationUnavailableError,
    format_minutes,
    looks_like_duration,
    parse_duration,
)
from .periods import DateRange, PeriodError, resolve_period
from .report import describe_range, render_report
from .time_log import LogStoreError, TimeLogStore

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "vi"


def _error(message: str) -> None:
    print(f"wlog: {message}", file=sys.stderr)


def open_store(settings: Settings) -> TimeLogStore:
    return TimeLogStore(settings.log_path, force_marker=settings.reset_marker)


def resolve_reference_date(value: Optional[str], now: datetime) -> Optional[date]:
    """
    Return the reference day: parsed ``value`` or the local day of ``now``.
    """
    if not value:
        return now.astimezone().date()
    return parse_date(value, now)


def run_log(
    args: Sequence[str],
    settings: Settings,
    *,
    on: Optional[str] = None,
    now: Optional[datetime] = None,
) -> int:
    """
    Append one entry: ``DURATION PROJECT [COMMENT...]``.

    Parameters
    ----------
    args : Sequence[str]
        Positional arguments from the command line.
    settings : Settings
        Loaded settings.
    on : Optional[str], optional
        Date expression for the entry (default: today).
    now : Optional[datetime], optional
        Current instant, for tests.

    Returns
    -------
    int
        Exit code.
    """
    current = now or datetime.now().astimezone()
    if len(args) < 2:
        _error("log requires a duration and a project.")
        return 1
    duration_token, project = args[0], args[1]
    comment = " ".join(args[2:])
    # Entries are whitespace-delimited; such a project could not be read back.
    if not project or project.split() != [project]:
        _error(f"project {project!r} must be a single non-empty word")
        return 1
    if looks_like_duration(project):
        _error(
            f"project {project!r} looks like a duration; "
            "usage is: wlog log DURATION PROJECT [COMMENT]"
        )
        return 1
    day = resolve_reference_date(on, current)
    if day is None:
        _error(f"cannot parse date {on!r}")
        return 1

    store = open_store(settings)
    try:
        minutes = parse_duration(
            duration_token,
            lambda: store.minutes_since_last_write(current.timestamp()),
        )
    except DurationUnavailableError as exc:
        _error(str(exc))
        return 1
    except LogStoreError as exc:
        _error(str(exc))
        return 1
    if not minutes:
        _error(f"invalid duration {duration_token!r}")
        return 1

    entry = LogEntry(day=day, project=project, minutes=minutes, comment=comment)
    try:
        store.append(entry)
    except LogStoreError as exc:
        _error(str(exc))
        return 1
    print(f"Logged {format_minutes(minutes)} to {project} on {format_date(day)}.")
    return 0


def resolve_report_range(
    period: Optional[str],
    reference: date,
    settings: Settings,
    now: datetime,
) -> DateRange:
    """
    Resolve a report period, falling back to the reference day.
    """
    resolved = resolve_period(period, reference, settings.week_start, now)
    if resolved is None:
        _error(f"cannot parse period {period!r}; reporting {format_date(reference)}")
        return DateRange(reference, reference)
    return resolved


def run_report(
    settings: Settings,
    *,
    period: Optional[str] = None,
    on: Optional[str] = None,
    verbose: bool = False,
    now: Optional[datetime] = None,
) -> int:
    """
    Print project totals for a period.

    Parameters
    ----------
    settings : Settings
        Loaded settings.
    period : Optional[str], optional
        Period keyword or range expression (default: day).
    on : Optional[str], optional
        Reference date expression (default: today).
    verbose : bool, optional
        Include the per-day listing.
    now : Optional[datetime], optional
        Current instant, for tests.

    Returns
    -------
    int
        Exit code.
    """
    current = now or datetime.now().astimezone()
    reference = resolve_reference_date(on, current)
    if reference is None:
        _error(f"cannot parse date {on!r}")
        return 1
    try:
        date_range = resolve_report_range(period, reference, settings, current)
    except PeriodError as exc:
        _error(str(exc))
        return 1
    try:
        lines_by_date = open_store(settings).extract_range(date_range.start, date_range.end)
    except LogStoreError as exc:
        _error(str(exc))
        return 1
    aggregation = aggregate_lines(lines_by_date)
    title = describe_range(date_range.start, date_range.end)
    for line in render_report(aggregation, settings.rates, verbose=verbose, title=title):
        print(line)
    return 0


def run_projects(
    settings: Settings,
    *,
    period: Optional[str] = "all",
    now: Optional[datetime] = None,
) -> int:
    """
    List projects logged in a period with their minute totals.
    """
    current = now or datetime.now().astimezone()
    reference = current.astimezone().date()
    try:
        date_range = resolve_report_range(period, reference, settings, current)
        lines_by_date = open_store(settings).extract_range(date_range.start, date_range.end)
    except (PeriodError, LogStoreError) as exc:
        _error(str(exc))
        return 1
    totals = aggregate_lines(lines_by_date).totals
    if not totals:
        print("No entries found.")
        return 0
    width = max(len(project) for project in totals)
    for project in sorted(totals):
        print(f"{project:<{width}}  {format_minutes(totals[project])}")
    return 0


def run_since(settings: Settings, *, now: Optional[datetime] = None) -> int:
    """
    Print minutes since the log was last written.
    """
    current = now or datetime.now().astimezone()
    try:
        minutes = open_store(settings).minutes_since_last_write(current.timestamp())
    except LogStoreError as exc:
        _error(str(exc))
        return 1
    if minutes is None:
        print("Nothing logged yet.")
        return 0
    print(f"{minutes} min ({format_minutes(minutes)}) since last entry.")
    return 0


def run_kill(settings: Settings, *, now: Optional[datetime] = None) -> int:
    """
    Reset the "since last entry" clock, abandoning the untracked time.
    """
    current = now or datetime.now().astimezone()
    try:
        abandoned = open_store(settings).reset_last_write(current)
    except LogStoreError as exc:
        _error(str(exc))
        return 1
    print(f"Abandoned {abandoned} min; clock reset.")
    return 0


def editor_command(settings: Settings) -> List[str]:
    """
    Return the editor argv for opening the log.

    Examples
    --------
    >>> from pathlib import Path
    >>> editor_command(Settings(log_path=Path("/tmp/w.log"), editor="code -w"))
    ['code', '-w', '/tmp/w.log']
    """
    editor = settings.editor or DEFAULT_EDITOR
    return [*shlex.split(editor), str(settings.log_path)]


def run_edit(settings: Settings) -> int:
    """
    Open the log in the configured editor.
    """
    command = editor_command(settings)
    logger.debug("running editor: %s", command)
    try:
        result = subprocess.run(command, check=False)
    except FileNotFoundError:
        _error(f"editor not found: {command[0]}")
        return 1
    return result.returncode
