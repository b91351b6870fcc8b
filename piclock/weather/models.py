"""Domain models for weather data and its cache."""

import math
from dataclasses import dataclass
from datetime import datetime

from piclock.lib.config import TemperatureUnit


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    rounded = math.floor(abs(value) + 0.5)
    return int(math.copysign(rounded, value)) if rounded else 0


@dataclass(frozen=True, slots=True)
class WeatherSnapshot:
    """Weather conditions from one successful fetch."""

    condition: str
    temperature: float
    unit: TemperatureUnit
    fetched_at: datetime
    description: str = ""
    location: str = ""

    @property
    def rounded_temperature(self) -> int:
        return round_half_away(self.temperature)

    def __str__(self) -> str:
        return f"{self.condition} {self.rounded_temperature}{self.unit.symbol}"


@dataclass(frozen=True, slots=True)
class WeatherCacheState:
    """Everything the client remembers between polls.

    Replaced wholesale on every fetch attempt. ``snapshot`` is either None
    (no fetch has succeeded yet) or the most recent successful fetch; a
    failed attempt never clears it. Times are monotonic seconds.
    """

    snapshot: WeatherSnapshot | None = None
    last_attempt_at: float | None = None
    last_success_at: float | None = None
    failures: int = 0
    next_eligible_at: float = 0.0
