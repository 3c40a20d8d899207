#!/usr/bin/env python3
"""
Fixed-width report table for aggregated project totals.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Mapping, Optional, Tuple

from .aggregate import Aggregation, format_entry_line
from .calendar_math import format_date, weekday_name, weekday_of

DEFAULT_CURRENCY = "USD"
TOTALS_LABEL = "TOTALS"
NO_WAGE = "-"


@dataclass(frozen=True)
class Rate:
    """
    Hourly rate for a project.

    Attributes
    ----------
    rate : float
        Amount per hour.
    currency : str
        Currency code, summed verbatim (no conversion).
    """

    rate: float
    currency: str = DEFAULT_CURRENCY


def format_header() -> str:
    return f"{'Project':>12}  {'Time':>6}  {'Hours':>7} | {'$$$.$$':>9} CUR"


def format_row(label: str, minutes: int, wage: Optional[float], currency: str) -> str:
    """
    Format one table row.

    Examples
    --------
    >>> format_row("site", 90, 75.0, "USD")
    '        site      90     1.5h |     75.00 USD'
    >>> format_row("misc", 30, None, "")
    '        misc      30     0.5h |         -'
    """
    hours = minutes / 60.0
    prefix = f"{label:>12}  {minutes:6d}  {hours:6.1f}h | "
    if wage is None:
        return f"{prefix}{NO_WAGE:>9}"
    return f"{prefix}{wage:9.2f} {currency}"


def project_wage(project: str, minutes: int, rates: Mapping[str, Rate]) -> Tuple[Optional[float], str]:
    """
    Return the wage and currency for a project, or (None, "") without a rate.

    Examples
    --------
    >>> project_wage("site", 90, {"site": Rate(50.0)})
    (75.0, 'USD')
    >>> project_wage("misc", 90, {})
    (None, '')
    """
    rate = rates.get(project)
    if rate is None:
        return None, ""
    return (minutes / 60.0) * rate.rate, rate.currency or DEFAULT_CURRENCY


def render_totals(
    totals: Mapping[str, int],
    rates: Optional[Mapping[str, Rate]] = None,
) -> List[str]:
    """
    Render project totals as table lines.

    Parameters
    ----------
    totals : Mapping[str, int]
        Minutes per project.
    rates : Optional[Mapping[str, Rate]], optional
        Hourly rates per project. Projects without a rate get no wage.

    Returns
    -------
    List[str]
        Header, one row per project (sorted by name), a rule, and one
        totals row per currency. Without projects a single zero totals
        row follows the rule.

    Examples
    --------
    >>> for line in render_totals({"site": 90, "misc": 30}, {"site": Rate(50.0)}):
    ...     print(line)
         Project    Time    Hours |    $$$.$$ CUR
            misc      30     0.5h |         -
            site      90     1.5h |     75.00 USD
    ---------------------------------------------
          TOTALS      30     0.5h |         -
          TOTALS      90     1.5h |     75.00 USD
    """
    rates = rates or {}
    header = format_header()
    lines = [header]
    # currency -> [minutes, wage]; "" holds projects without a rate.
    by_currency: Dict[str, List[float]] = {}
    for project in sorted(totals):
        minutes = totals[project]
        wage, currency = project_wage(project, minutes, rates)
        lines.append(format_row(project, minutes, wage, currency))
        bucket = by_currency.setdefault(currency, [0, 0.0])
        bucket[0] += minutes
        if wage is not None:
            bucket[1] += wage
    lines.append("-" * len(header))
    if not by_currency:
        by_currency[""] = [0, 0.0]
    for currency in sorted(by_currency):
        minutes, wage = by_currency[currency]
        lines.append(
            format_row(TOTALS_LABEL, int(minutes), wage if currency else None, currency)
        )
    return lines


def render_day_listing(aggregation: Aggregation) -> List[str]:
    """
    Render the per-day listing shown by verbose reports.

    Each day gets a heading with its weekday, its raw entries, and a
    per-project subtotal line.
    """
    lines: List[str] = []
    for day, entries in aggregation.entries_by_date.items():
        lines.append(f"{format_date(day)} {weekday_name(weekday_of(day), short=True)}")
        for entry in entries:
            lines.append(f"  {format_entry_line(entry)}")
        subtotals = aggregation.by_date.get(day, {})
        summary = ", ".join(
            f"{project} {minutes}" for project, minutes in sorted(subtotals.items())
        )
        lines.append(f"  = {sum(subtotals.values())} min ({summary})")
    return lines


def render_report(
    aggregation: Aggregation,
    rates: Optional[Mapping[str, Rate]] = None,
    *,
    verbose: bool = False,
    title: Optional[str] = None,
) -> List[str]:
    """
    Render a full report: optional title, optional day listing, totals table.
    """
    lines: List[str] = []
    if title:
        lines.append(title)
    if verbose and aggregation.entries_by_date:
        lines.extend(render_day_listing(aggregation))
        lines.append("")
    lines.extend(render_totals(aggregation.totals, rates))
    return lines


def describe_range(start: Optional[date], end: Optional[date]) -> str:
    """
    Return a short human description of a report range.

    Examples
    --------
    >>> describe_range(date(2024, 1, 1), date(2024, 1, 7))
    'Report 2024-01-01 .. 2024-01-07'
    >>> describe_range(date(2024, 1, 1), date(2024, 1, 1))
    'Report 2024-01-01'
    >>> describe_range(None, None)
    'Report all entries'
    """
    if start is None and end is None:
        return "Report all entries"
    start_text = format_date(start) if start else "..."
    end_text = format_date(end) if end else "..."
    if start_text == end_text:
        return f"Report {start_text}"
    return f"Report {start_text} .. {end_text}"
