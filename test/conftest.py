"""
Shared pytest fixtures for wlog tests.
"""

from __future__ import annotations

import time

import pytest


@pytest.fixture(autouse=True)
def isolate_wlog_paths(tmp_path, monkeypatch) -> None:
    """
    Ensure tests do not read/write the real work log or configuration.

    Parameters
    ----------
    tmp_path : pathlib.Path
        Temporary path provided by pytest.
    monkeypatch : pytest.MonkeyPatch
        Monkeypatch fixture for environment updates.
    """
    monkeypatch.setenv("WLOG_CONFIG_PATH", str(tmp_path / "config.toml"))
    monkeypatch.setenv("WLOG_FILE", str(tmp_path / "work.log"))
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)


@pytest.fixture
def new_york_time(monkeypatch):
    """
    Switch local time to America/New_York for daylight-saving tests.

    Parameters
    ----------
    monkeypatch : pytest.MonkeyPatch
        Monkeypatch fixture for environment updates.
    """
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
