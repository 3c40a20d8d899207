#!/usr/bin/env python3
"""
Append-only flat-file storage for work log entries.
"""

from __future__ import annotations

import logging
import os
import time
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional

from .aggregate import LogEntry, format_entry_line, leading_date
from .calendar_math import format_date

logger = logging.getLogger(__name__)

RESET_MARKER = "# reset"
# mtime is trusted after utime() when it lands this close to the requested time.
MTIME_TOLERANCE_SECONDS = 2.0


class LogStoreError(RuntimeError):
    """
    Raised when the log file cannot be read or written.
    """


def get_default_log_path() -> Path:
    """
    Return the default log file path.

    Returns
    -------
    Path
        ``$WLOG_FILE`` when set, otherwise ``~/.wlog``.

    Examples
    --------
    >>> isinstance(get_default_log_path(), Path)
    True
    """
    override = os.environ.get("WLOG_FILE", "").strip()
    if override:
        return Path(os.path.expandvars(os.path.expanduser(override)))
    return Path.home() / ".wlog"


def _date_bound(value: Optional[date]) -> str:
    return format_date(value) if value else ""


class TimeLogStore:
    """
    Flat-file work log: one fixed-width line per entry, appended in order.
    """

    def __init__(self, path: Optional[Path] = None, *, force_marker: bool = False) -> None:
        self.path = path or get_default_log_path()
        self.force_marker = force_marker

    def append(self, entry: LogEntry) -> str:
        """
        Append an entry as one line.

        Parameters
        ----------
        entry : LogEntry
            Entry to write; newlines in the comment are flattened.

        Returns
        -------
        str
            The line written (without newline).
        """
        line = format_entry_line(entry)
        self._append_line(line)
        logger.debug("appended to %s: %s", self.path, line)
        return line

    def _append_line(self, line: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        except OSError as exc:
            raise LogStoreError(f"cannot write {self.path}: {exc}") from exc

    def read_lines(self) -> List[str]:
        """
        Return all log lines; a missing log reads as empty.

        Bytes that are not UTF-8 are replaced, so a hand-edited line with a
        stray encoding still reaches the entry parser.
        """
        if not self.path.exists():
            logger.debug("log %s does not exist yet", self.path)
            return []
        try:
            with self.path.open("r", encoding="utf-8", errors="replace") as handle:
                return [line.rstrip("\n") for line in handle]
        except OSError as exc:
            raise LogStoreError(f"cannot read {self.path}: {exc}") from exc

    def extract_range(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Dict[str, List[str]]:
        """
        Collect raw lines whose leading date lies in ``[start, end]``.

        Parameters
        ----------
        start : Optional[date], optional
            First day (inclusive); None means unbounded.
        end : Optional[date], optional
            Last day (inclusive); None means unbounded.

        Returns
        -------
        Dict[str, List[str]]
            Lines keyed by their ``YYYY-MM-DD`` token, in file order.
        """
        low = _date_bound(start)
        high = _date_bound(end)
        extracted: Dict[str, List[str]] = {}
        for line in self.read_lines():
            key = leading_date(line)
            if key is None:
                continue
            # Canonical dates compare correctly as strings.
            if low and key < low:
                continue
            if high and key > high:
                continue
            extracted.setdefault(key, []).append(line)
        logger.debug(
            "extracted %d day(s) from %s for %s..%s",
            len(extracted),
            self.path,
            low or "*",
            high or "*",
        )
        return extracted

    def last_write(self) -> Optional[float]:
        """
        Return the log's modification timestamp, or None if never written.
        """
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise LogStoreError(f"cannot stat {self.path}: {exc}") from exc
        if stat.st_size == 0:
            return None
        return stat.st_mtime

    def minutes_since_last_write(self, now: Optional[float] = None) -> Optional[int]:
        """
        Return whole minutes since the log was last modified.

        Parameters
        ----------
        now : Optional[float], optional
            Current epoch seconds (default: ``time.time()``).

        Returns
        -------
        Optional[int]
            Elapsed minutes, or None when the log has never been written.
        """
        modified = self.last_write()
        if modified is None:
            return None
        current = time.time() if now is None else now
        return max(0, int((current - modified) // 60))

    def reset_last_write(self, now: Optional[datetime] = None) -> int:
        """
        Restart the "since last write" clock.

        The modification time is set to now. When that does not stick, or
        markers are forced, a marker line recording the abandoned minutes
        is appended instead.

        Returns
        -------
        int
            Minutes abandoned by the reset (0 if the log was never written).
        """
        moment = now or datetime.now().astimezone()
        timestamp = moment.timestamp()
        abandoned = self.minutes_since_last_write(timestamp) or 0
        if not self.path.exists():
            return abandoned
        if not self.force_marker and self._touch(timestamp):
            logger.debug("reset %s by updating its modification time", self.path)
            return abandoned
        marker = f"{RESET_MARKER} {moment.strftime('%Y-%m-%d %H:%M')} abandoned {abandoned} min"
        self._append_line(marker)
        logger.debug("reset %s with marker line", self.path)
        return abandoned

    def _touch(self, timestamp: float) -> bool:
        try:
            os.utime(self.path, (timestamp, timestamp))
            modified = self.path.stat().st_mtime
        except OSError as exc:
            logger.warning("could not update modification time of %s: %s", self.path, exc)
            return False
        return abs(modified - timestamp) <= MTIME_TOLERANCE_SECONDS
