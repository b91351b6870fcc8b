"""Ambient light sources.

Reference illuminance levels (lux):

    0.0001        moonless, overcast night sky
    0.05-0.3      full moon on a clear night
    3.4           dark limit of civil twilight
    20-50         public areas with dark surroundings
    50            family living room lights
    100           very dark overcast day
    320-500       office lighting
    1000          overcast day
    10000-25000   full daylight (not direct sun)
"""

from datetime import time
from typing import Protocol

from piclock.lib.clock import Clock
from piclock.lib.exceptions import ConfigurationError, SensorError
from piclock.logging import get_logger

logger = get_logger("light.sensor")

# Full brightness during the day, full darkness at night, linear ramps between.
BRIGHT_START = time(8, 0)
BRIGHT_END = time(19, 0)
DARK_START = time(23, 0)  # Must be before midnight
DARK_END = time(7, 0)  # Must be after midnight


class LightSensorProtocol(Protocol):
    """Protocol for ambient light sources."""

    def read_lux(self) -> float: ...

    def close(self) -> None: ...


def _seconds(t: time) -> float:
    return t.hour * 3600 + t.minute * 60 + t.second + t.microsecond / 1_000_000


def daylight_fraction(t: time) -> float:
    """Return how bright it should be at wall-clock time ``t`` (0 to 1)."""
    now = _seconds(t)
    bright_start = _seconds(BRIGHT_START)
    bright_end = _seconds(BRIGHT_END)
    dark_start = _seconds(DARK_START)
    dark_end = _seconds(DARK_END)

    if bright_start <= now < bright_end:
        return 1.0
    if now >= dark_start or now < dark_end:
        return 0.0
    if bright_end <= now < dark_start:
        return (dark_start - now) / (dark_start - bright_end)
    # Dawn ramp between dark_end and bright_start
    return (now - dark_end) / (bright_start - dark_end)


class TimeOfDayLightSensor:
    """Light source that estimates ambient light from the time of day."""

    def __init__(self, clock: Clock, min_lux: float, max_lux: float) -> None:
        self._clock = clock
        self._min_lux = min_lux
        self._max_lux = max_lux

    def read_lux(self) -> float:
        fraction = daylight_fraction(self._clock.now().timetz())
        return self._min_lux + fraction * (self._max_lux - self._min_lux)

    def close(self) -> None:
        """No-op for the time-based source."""


class VEML7700Sensor:
    """Adafruit VEML7700 ambient light sensor on the I2C bus."""

    def __init__(self) -> None:
        """Initialize the sensor with I2C connection."""
        try:
            import adafruit_veml7700
            import board
            import busio
        except ImportError as exc:
            raise ConfigurationError(
                "VEML7700 sensor requires 'adafruit-circuitpython-veml7700' "
                "and 'adafruit-blinka' on Raspberry Pi."
            ) from exc

        try:
            self._i2c = busio.I2C(board.SCL, board.SDA)
            self._sensor = adafruit_veml7700.VEML7700(self._i2c)
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"VEML7700 sensor not found: {exc}") from exc
        logger.info("VEML7700 light sensor ready")

    def read_lux(self) -> float:
        """Read the current illuminance."""
        try:
            return float(self._sensor.lux)
        except (OSError, RuntimeError, ValueError) as exc:
            raise SensorError(f"VEML7700 read failed: {exc}") from exc

    def close(self) -> None:
        """Release the I2C bus."""
        try:
            self._i2c.deinit()
        except (OSError, RuntimeError, ValueError) as exc:
            raise SensorError(f"VEML7700 close failed: {exc}") from exc
