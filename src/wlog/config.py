#!/usr/bin/env python3
"""
Load wlog settings: log path, week start, and project rates.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import tomllib

from .calendar_math import weekday_index, weekday_name
from .report import DEFAULT_CURRENCY, Rate
from .time_log import get_default_log_path

logger = logging.getLogger(__name__)

DEFAULT_WEEK_START = "Sunday"
RATE_TEXT = re.compile(r"^\s*(\d+(?:\.\d+)?|\.\d+)\s*([A-Za-z]{3})?\s*$")


class ConfigError(ValueError):
    """
    Raised when the configuration file is unreadable or invalid.
    """


@dataclass(frozen=True)
class Settings:
    """
    Resolved configuration.

    Attributes
    ----------
    log_path : Path
        Work log file.
    week_start : int
        Sunday-based index of the first day of a reporting week.
    rates : Dict[str, Rate]
        Hourly rate per project.
    reset_marker : bool
        Always append a marker line on reset.
    editor : Optional[str]
        Editor command for ``wlog edit``.
    """

    log_path: Path
    week_start: int = 0
    rates: Dict[str, Rate] = field(default_factory=dict)
    reset_marker: bool = False
    editor: Optional[str] = None


def get_config_path() -> Path:
    """
    Return the configuration file path.

    Returns
    -------
    Path
        ``$WLOG_CONFIG_PATH`` when set, otherwise ``~/.config/wlog/config.toml``.

    Examples
    --------
    >>> isinstance(get_config_path(), Path)
    True
    """
    override = os.environ.get("WLOG_CONFIG_PATH", "").strip()
    if override:
        return Path(os.path.expandvars(os.path.expanduser(override)))
    return Path.home() / ".config" / "wlog" / "config.toml"


def parse_week_start(value: Any) -> int:
    """
    Resolve a configured week start to a Sunday-based index.

    Raises
    ------
    ConfigError
        When the value is not a unique weekday name or prefix.

    Examples
    --------
    >>> parse_week_start("mon")
    1
    >>> parse_week_start("S")
    Traceback (most recent call last):
    ...
    wlog.config.ConfigError: week_start 'S' is not a unique weekday name
    """
    index = weekday_index(str(value)) if value is not None else None
    if index is None:
        raise ConfigError(f"week_start {value!r} is not a unique weekday name")
    return index


def parse_rate(project: str, value: Any) -> Rate:
    """
    Interpret one ``[rates]`` entry.

    Accepts a number, a string such as ``"80 EUR"``, or a table with
    ``rate`` and optional ``currency`` keys.

    Examples
    --------
    >>> parse_rate("site", 50)
    Rate(rate=50.0, currency='USD')
    >>> parse_rate("site", "80 eur")
    Rate(rate=80.0, currency='EUR')
    >>> parse_rate("site", {"rate": 12.5, "currency": "GBP"})
    Rate(rate=12.5, currency='GBP')
    """
    if isinstance(value, bool):
        raise ConfigError(f"rate for {project!r} must be a number")
    if isinstance(value, (int, float)):
        return Rate(float(value), DEFAULT_CURRENCY)
    if isinstance(value, str):
        match = RATE_TEXT.match(value)
        if not match:
            raise ConfigError(f"rate for {project!r} is not understood: {value!r}")
        currency = (match.group(2) or DEFAULT_CURRENCY).upper()
        return Rate(float(match.group(1)), currency)
    if isinstance(value, dict):
        try:
            amount = float(value["rate"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"rate for {project!r} needs a numeric 'rate'") from exc
        currency = str(value.get("currency") or DEFAULT_CURRENCY).strip().upper()
        return Rate(amount, currency)
    raise ConfigError(f"rate for {project!r} is not understood: {value!r}")


def _parse_rates(raw: Any) -> Dict[str, Rate]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("[rates] must be a table of project = rate")
    return {str(project): parse_rate(str(project), value) for project, value in raw.items()}


def read_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read the raw configuration table, or an empty dict when missing.
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        logger.debug("no configuration at %s; using defaults", config_path)
        return {}
    try:
        raw_text = config_path.read_text(encoding="utf-8")
        return tomllib.loads(raw_text)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"cannot load {config_path}: {exc}") from exc


def settings_from_mapping(
    raw: Mapping[str, Any],
    *,
    log_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build settings from a parsed configuration table.

    Parameters
    ----------
    raw : Mapping[str, Any]
        Parsed TOML data.
    log_path : Optional[Path], optional
        Explicit log path (``--file``); wins over ``WLOG_FILE`` and
        the ``log_file`` key.
    environ : Optional[Mapping[str, str]], optional
        Environment used for editor lookup (default: ``os.environ``).

    Returns
    -------
    Settings
        Validated settings.

    Examples
    --------
    >>> settings = settings_from_mapping(
    ...     {"week_start": "Monday", "rates": {"site": 40}},
    ...     log_path=Path("/tmp/work.log"),
    ...     environ={},
    ... )
    >>> settings.week_start, settings.rates["site"].rate, settings.editor
    (1, 40.0, None)
    """
    env = os.environ if environ is None else environ
    if log_path is None:
        if env.get("WLOG_FILE", "").strip():
            log_path = get_default_log_path()
        elif raw.get("log_file"):
            log_path = Path(os.path.expandvars(os.path.expanduser(str(raw["log_file"]))))
        else:
            log_path = get_default_log_path()
    week_start = parse_week_start(raw.get("week_start", DEFAULT_WEEK_START))
    editor = raw.get("editor") or env.get("VISUAL") or env.get("EDITOR") or None
    settings = Settings(
        log_path=log_path,
        week_start=week_start,
        rates=_parse_rates(raw.get("rates")),
        reset_marker=bool(raw.get("reset_marker", False)),
        editor=str(editor) if editor else None,
    )
    logger.debug(
        "settings: log=%s week_start=%s rates=%d",
        settings.log_path,
        weekday_name(settings.week_start),
        len(settings.rates),
    )
    return settings


def load_settings(
    path: Optional[Path] = None,
    *,
    log_path: Optional[Path] = None,
) -> Settings:
    """
    Load and validate settings from disk.

    Raises
    ------
    ConfigError
        When the file cannot be decoded or holds invalid values.
    """
    return settings_from_mapping(read_config(path), log_path=log_path)
