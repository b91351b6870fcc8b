"""Weather endpoint client with caching and failure backoff."""

from .client import WeatherClient
from .models import WeatherCacheState, WeatherSnapshot
from .payload import parse_weather
from .schedule import PollAction, failure_backoff, plan_poll

__all__ = [
    "PollAction",
    "WeatherCacheState",
    "WeatherClient",
    "WeatherSnapshot",
    "failure_backoff",
    "parse_weather",
    "plan_poll",
]
