"""
Tests for configuration loading.
"""

from __future__ import annotations

import doctest
from pathlib import Path

import pytest

import wlog.config as config
from wlog.report import Rate


@pytest.mark.unit
def test_load_settings_defaults_without_file(tmp_path):
    """
    Ensure a missing config file yields default settings.

    Returns
    -------
    None
        This test asserts default settings.
    """
    settings = config.load_settings(tmp_path / "missing.toml")

    assert settings.week_start == 0
    assert settings.rates == {}
    assert settings.reset_marker is False
    assert settings.log_path == tmp_path / "work.log"


@pytest.mark.unit
def test_load_settings_reads_toml(tmp_path, monkeypatch):
    """
    Ensure TOML keys populate settings.

    Returns
    -------
    None
        This test asserts config parsing.
    """
    monkeypatch.delenv("WLOG_FILE")
    path = tmp_path / "config.toml"
    path.write_text(
        "\n".join(
            [
                f'log_file = "{tmp_path / "from-config.log"}"',
                'week_start = "Mon"',
                "reset_marker = true",
                'editor = "nano"',
                "[rates]",
                "site = 50",
                'consult = "80 EUR"',
                'support = { rate = 35.5, currency = "gbp" }',
            ]
        ),
        encoding="utf-8",
    )

    settings = config.load_settings(path)

    assert settings.log_path == tmp_path / "from-config.log"
    assert settings.week_start == 1
    assert settings.reset_marker is True
    assert settings.editor == "nano"
    assert settings.rates == {
        "site": Rate(50.0, "USD"),
        "consult": Rate(80.0, "EUR"),
        "support": Rate(35.5, "GBP"),
    }


@pytest.mark.unit
def test_log_path_precedence(tmp_path, monkeypatch):
    """
    Ensure --file beats WLOG_FILE, which beats the config key.

    Returns
    -------
    None
        This test asserts log path precedence.
    """
    raw = {"log_file": str(tmp_path / "config.log")}

    explicit = config.settings_from_mapping(raw, log_path=tmp_path / "cli.log")
    assert explicit.log_path == tmp_path / "cli.log"

    from_env = config.settings_from_mapping(raw)
    assert from_env.log_path == tmp_path / "work.log"

    monkeypatch.delenv("WLOG_FILE")
    from_config = config.settings_from_mapping(raw)
    assert from_config.log_path == tmp_path / "config.log"


@pytest.mark.parametrize("value", ["T", "S", "", "Funday", 3])
@pytest.mark.unit
def test_invalid_week_start_is_fatal(value):
    """
    Ensure ambiguous or unknown week starts are configuration errors.

    Returns
    -------
    None
        This test asserts week start validation.
    """
    with pytest.raises(config.ConfigError):
        config.settings_from_mapping({"week_start": value})


@pytest.mark.parametrize(
    "value",
    ["lots", True, {"currency": "EUR"}, {"rate": "x"}, [1, 2]],
)
@pytest.mark.unit
def test_invalid_rates_are_fatal(value):
    """
    Ensure uninterpretable rates name the offending project.

    Returns
    -------
    None
        This test asserts rate validation.
    """
    with pytest.raises(config.ConfigError, match="site"):
        config.settings_from_mapping({"rates": {"site": value}})


@pytest.mark.unit
def test_undecodable_config_is_fatal(tmp_path):
    """
    Ensure broken TOML is reported with its path.

    Returns
    -------
    None
        This test asserts decode failures.
    """
    path = tmp_path / "config.toml"
    path.write_text("week_start = [", encoding="utf-8")

    with pytest.raises(config.ConfigError, match="config.toml"):
        config.load_settings(path)


@pytest.mark.unit
def test_editor_falls_back_to_environment():
    """
    Ensure VISUAL and EDITOR are consulted when no editor is configured.

    Returns
    -------
    None
        This test asserts editor lookup.
    """
    settings = config.settings_from_mapping({}, environ={"EDITOR": "ed"})
    assert settings.editor == "ed"
    settings = config.settings_from_mapping({}, environ={"EDITOR": "ed", "VISUAL": "code -w"})
    assert settings.editor == "code -w"


@pytest.mark.unit
def test_config_path_honors_environment(tmp_path, monkeypatch):
    """
    Ensure WLOG_CONFIG_PATH overrides the default location.

    Returns
    -------
    None
        This test asserts config path resolution.
    """
    assert config.get_config_path() == tmp_path / "config.toml"
    monkeypatch.delenv("WLOG_CONFIG_PATH")
    assert config.get_config_path() == Path.home() / ".config" / "wlog" / "config.toml"


@pytest.mark.unit
def test_config_doctest_examples():
    """
    Run doctest examples embedded in config helpers.

    Returns
    -------
    None
        This test asserts doctest coverage for config helpers.
    """
    results = doctest.testmod(config)
    assert results.failed == 0
