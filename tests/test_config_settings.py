"""Tests for runtime settings defaults, overrides and validation errors."""

import pytest

from gains_ledger.config import AppSettings, SettingsLoadError, config_load_settings


def test_config_defaults_match_report_conventions() -> None:
    """Expose documented defaults when nothing is configured.

    Returns:
        None: Assertions validate default values.

    Raises:
        AssertionError: Raised when a default drifts.
    """

    settings = AppSettings()

    assert settings.csv_pattern == "./tax/2024_name/*/*.csv"
    assert settings.csv_skiprows == 2
    assert settings.gains_method == "both"
    assert settings.partition_by_asset is False
    assert settings.report_currency == "THB"
    assert settings.report_display_digits == 2


def test_config_load_settings_ignores_unset_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Let environment values stand when override values are None."""

    monkeypatch.setenv("GAINS_METHOD", "FIFO")
    monkeypatch.setenv("CSV_SKIPROWS", "4")

    settings = config_load_settings(overrides={"gains_method": None, "csv_skiprows": 0})

    assert settings.gains_method == "fifo"
    assert settings.csv_skiprows == 0


def test_config_load_settings_wraps_validation_errors() -> None:
    """Raise SettingsLoadError for unsupported methods and negative skiprows."""

    with pytest.raises(SettingsLoadError, match="gains_method"):
        config_load_settings(overrides={"gains_method": "lifo"})
    with pytest.raises(SettingsLoadError, match="csv_skiprows"):
        config_load_settings(overrides={"csv_skiprows": -1})
