"""Enumerations for the Pi Clock application."""

from enum import StrEnum


class DisplayBackend(StrEnum):
    ALPHANUM = "alphanum"
    LCD = "lcd"
    MOCK = "mock"


class LightSensorKind(StrEnum):
    """Source of ambient light readings."""

    VEML7700 = "veml7700"
    TIME = "time"  # Derived from the time of day
    RANDOM = "random"  # Random walk, for demos
    MOCK = "mock"  # Fixed MOCK_LUX reading
    NONE = "none"  # Fixed default brightness


class BrightnessCurve(StrEnum):
    """Shape of the lux to brightness mapping."""

    LINEAR = "linear"
    LOG = "log"


class TemperatureUnit(StrEnum):
    """Unit systems understood by the OpenWeather API."""

    IMPERIAL = "imperial"
    METRIC = "metric"
    STANDARD = "standard"

    @property
    def symbol(self) -> str:
        """Single character shown after a temperature."""
        return _UNIT_SYMBOLS[self]


_UNIT_SYMBOLS: dict[TemperatureUnit, str] = {
    TemperatureUnit.IMPERIAL: "F",
    TemperatureUnit.METRIC: "C",
    TemperatureUnit.STANDARD: "K",
}
