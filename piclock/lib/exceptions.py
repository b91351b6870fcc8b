"""Custom exceptions for the Pi Clock application.

Provides a hierarchy of domain-specific exceptions so that each subsystem
can report recoverable I/O failures without unwinding the main loop.
"""


class PiClockError(Exception):
    """Base exception for all application errors."""


class ConfigurationError(PiClockError):
    """Raised at startup when the configuration cannot be honoured."""


class DisplayError(PiClockError):
    """Raised when writing to a display device fails."""


class SensorError(PiClockError):
    """Raised when reading the ambient light sensor fails."""


class WeatherError(PiClockError):
    """Base exception for weather refresh failures."""


class WeatherFetchError(WeatherError):
    """Raised when the weather endpoint cannot be reached in time."""


class WeatherParseError(WeatherError):
    """Raised when the weather endpoint returns an unusable payload."""
