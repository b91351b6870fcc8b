"""Shared pytest fixtures for the test suite."""

import logging
import sys
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

# Mock hardware-specific modules before they're imported
# These are only available on Raspberry Pi hardware
sys.modules["adafruit_ht16k33"] = MagicMock()
sys.modules["adafruit_ht16k33.segments"] = MagicMock()
sys.modules["adafruit_veml7700"] = MagicMock()
sys.modules["board"] = MagicMock()
sys.modules["busio"] = MagicMock()
sys.modules["RPLCD"] = MagicMock()
sys.modules["RPLCD.i2c"] = MagicMock()

_gpiozero = MagicMock()
_gpiozero.GPIOZeroError = type("GPIOZeroError", (Exception,), {})
sys.modules["gpiozero"] = _gpiozero

from piclock.lib.config import Settings, TemperatureUnit
from piclock.lib.config.testing import set_settings
from piclock.weather.models import WeatherSnapshot

WEATHER_URL = "http://weather.test/current"


@pytest.fixture(autouse=True)
def configure_caplog(caplog):
    """Ensure caplog captures logs from the piclock namespace."""
    caplog.set_level(logging.DEBUG, logger="piclock")


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset global settings after each test to avoid cross-test pollution."""
    yield
    set_settings(None)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime, monotonic: float = 1000.0) -> None:
        self._now = start
        self._monotonic = monotonic

    def now(self) -> datetime:
        return self._now

    def monotonic(self) -> float:
        return self._monotonic

    def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)
        self._monotonic += seconds


def make_settings(**overrides) -> Settings:
    """Build settings that ignore the environment's .env file."""
    overrides.setdefault("weather_url", WEATHER_URL)
    return Settings(_env_file=None, **overrides)


def make_snapshot(
    condition: str = "Cloudy",
    temperature: float = 18.0,
    unit: TemperatureUnit = TemperatureUnit.METRIC,
    fetched_at: datetime | None = None,
    description: str = "",
) -> WeatherSnapshot:
    return WeatherSnapshot(
        condition=condition,
        temperature=temperature,
        unit=unit,
        fetched_at=fetched_at or datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC),
        description=description,
    )


@pytest.fixture
def frozen_time():
    """Return a fixed datetime for deterministic tests.

    Saturday, and the start of a single-row page cycle.
    """
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def fake_clock(frozen_time):
    return FakeClock(frozen_time)


@pytest.fixture
def settings():
    """Valid settings pointing at a test weather endpoint."""
    test_settings = make_settings()
    set_settings(test_settings)
    return test_settings
