"""Centralized configuration for the Pi Clock application.

This package provides:
- Enums for display backends, light sources and temperature units
- Pydantic settings models for configuration
"""

from .enums import (
    BrightnessCurve,
    DisplayBackend,
    LightSensorKind,
    TemperatureUnit,
)
from .settings import (
    OPEN_WEATHER_URL,
    AlphanumSettings,
    BrightnessSettings,
    ClockSettings,
    DisplaySettings,
    LCDSettings,
    LightSettings,
    MockDisplaySettings,
    Settings,
    WeatherSettings,
    get_settings,
    parse_display_backends,
)

__all__ = [
    # Enums
    "BrightnessCurve",
    "DisplayBackend",
    "LightSensorKind",
    "TemperatureUnit",
    # Settings models
    "AlphanumSettings",
    "BrightnessSettings",
    "ClockSettings",
    "DisplaySettings",
    "LCDSettings",
    "LightSettings",
    "MockDisplaySettings",
    "Settings",
    "WeatherSettings",
    # Constants
    "OPEN_WEATHER_URL",
    # Functions
    "get_settings",
    "parse_display_backends",
]
