"""Tests for environment-driven settings."""

from __future__ import annotations

import pathlib

import pytest

from spacewx.config import DEFAULT_REFRESH_SECONDS, Settings

ENV_VARS = [
    "SPACEWX_DATA_SOURCE",
    "SPACEWX_BASE_URL",
    "SPACEWX_REFRESH_SECONDS",
    "SPACEWX_STATE_DIR",
    "SPACEWX_HTTP_TIMEOUT",
    "SPACEWX_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = Settings.from_env(dotenv=False)
    assert settings.data_source == "space_weather_data.csv"
    assert settings.base_url is None
    assert settings.refresh_seconds == DEFAULT_REFRESH_SECONDS == 600.0
    assert settings.state_dir == pathlib.Path("./state")
    assert settings.log_level == "INFO"


def test_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SPACEWX_DATA_SOURCE", "/kp.csv")
    monkeypatch.setenv("SPACEWX_BASE_URL", "https://ops.test")
    monkeypatch.setenv("SPACEWX_REFRESH_SECONDS", "60")
    monkeypatch.setenv("SPACEWX_STATE_DIR", "/var/lib/spacewx")
    monkeypatch.setenv("SPACEWX_LOG_LEVEL", "debug")

    settings = Settings.from_env(dotenv=False)
    assert settings.data_source == "/kp.csv"
    assert settings.base_url == "https://ops.test"
    assert settings.refresh_seconds == 60.0
    assert settings.state_dir == pathlib.Path("/var/lib/spacewx")
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["soon", "0", "-5"])
def test_bad_refresh_interval(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("SPACEWX_REFRESH_SECONDS", raw)
    with pytest.raises(ValueError, match="SPACEWX_REFRESH_SECONDS"):
        Settings.from_env(dotenv=False)
