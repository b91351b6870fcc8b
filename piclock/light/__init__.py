"""Ambient light sources and brightness control."""

from .brightness import BrightnessController, normalize_lux
from .models import BrightnessSample
from .sensor import LightSensorProtocol, TimeOfDayLightSensor, VEML7700Sensor

__all__ = [
    "BrightnessController",
    "BrightnessSample",
    "LightSensorProtocol",
    "TimeOfDayLightSensor",
    "VEML7700Sensor",
    "normalize_lux",
]
