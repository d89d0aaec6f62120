"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from config import Settings, get_project_root
from hbarchart.layout import ChartConfig


def test_defaults_match_chart_config_defaults() -> None:
    settings = Settings(_env_file=None)
    config = ChartConfig(settings.chart_overrides())

    assert config.defaults == ChartConfig().defaults
    assert settings.LOG_LEVEL == 'ERROR'


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('BAR_PADDING', '0.5')
    monkeypatch.setenv('MIN_BAR_THICKNESS', 'none')
    monkeypatch.setenv('LOG_LEVEL', 'debug')

    settings = Settings(_env_file=None)

    assert settings.BAR_PADDING == 0.5
    assert settings.MIN_BAR_THICKNESS is None
    assert settings.LOG_LEVEL == 'DEBUG'
    assert settings.chart_overrides()['min_bar_thickness'] is None


@pytest.mark.parametrize(
    "name, value",
    [
        ('LOG_LEVEL', 'VERBOSE'),
        ('BAR_PADDING', '1.5'),
        ('LEAST_TINTED_COLOR', '  '),
        ('MIN_BAR_THICKNESS', '80'),
    ],
)
def test_invalid_settings_are_rejected(monkeypatch: pytest.MonkeyPatch, name, value) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_project_root_holds_config_module() -> None:
    assert (get_project_root() / 'config.py').exists()
