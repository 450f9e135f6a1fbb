"""Runtime settings, read from the environment (a local .env is honoured)."""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_DATA_SOURCE = "space_weather_data.csv"
DEFAULT_REFRESH_SECONDS = 600.0  # 10 minutes
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_STATE_DIR = "./state"


@dataclass(frozen=True)
class Settings:
    data_source: str = DEFAULT_DATA_SOURCE
    base_url: str | None = None
    refresh_seconds: float = DEFAULT_REFRESH_SECONDS
    state_dir: pathlib.Path = pathlib.Path(DEFAULT_STATE_DIR)
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> Settings:
        """
        Build settings from SPACEWX_* environment variables.

        Raises:
            ValueError: if a numeric variable is not a positive number.
        """
        if dotenv:
            load_dotenv()
        return cls(
            data_source=os.getenv("SPACEWX_DATA_SOURCE", DEFAULT_DATA_SOURCE),
            base_url=os.getenv("SPACEWX_BASE_URL") or None,
            refresh_seconds=_positive_float("SPACEWX_REFRESH_SECONDS", DEFAULT_REFRESH_SECONDS),
            state_dir=pathlib.Path(os.getenv("SPACEWX_STATE_DIR", DEFAULT_STATE_DIR)),
            http_timeout=_positive_float("SPACEWX_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
            log_level=os.getenv("SPACEWX_LOG_LEVEL", "INFO").upper(),
        )


def _positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value
