"""Weather endpoint response parsing.

Two JSON shapes are understood:

    {"condition": "Cloudy", "temperature": 18, "description": "..."}

and the OpenWeather current-weather document, of which only
``weather[0].main``, ``weather[0].description``, ``main.temp`` and ``name``
are used. Anything else is a parse failure.
"""

import json
from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from piclock.lib.config import TemperatureUnit
from piclock.lib.exceptions import WeatherParseError
from piclock.weather.models import WeatherSnapshot

_Condition = Annotated[str, Field(min_length=1)]


class _Payload(BaseModel):
    model_config = ConfigDict(strict=True, allow_inf_nan=False, extra="ignore")


class SimpleWeather(_Payload):
    """Minimal ``{"condition", "temperature"}`` document."""

    condition: _Condition
    temperature: float
    description: str = ""


class OpenWeatherCondition(_Payload):
    main: _Condition
    description: str = ""


class OpenWeatherMain(_Payload):
    temp: float


class OpenWeatherResponse(_Payload):
    """Subset of the OpenWeather current-weather response."""

    weather: Annotated[list[OpenWeatherCondition], Field(min_length=1)]
    main: OpenWeatherMain
    name: str = ""


def _is_open_weather(document: dict[str, Any]) -> bool:
    return "weather" in document or "main" in document


def parse_weather(
    body: bytes | str, *, unit: TemperatureUnit, fetched_at: datetime
) -> WeatherSnapshot:
    """Build a snapshot from a response body.

    Raises:
        WeatherParseError: If the body is not JSON or has neither shape.
    """
    try:
        document = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise WeatherParseError(f"Response is not valid JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise WeatherParseError(
            f"Expected a JSON object, got {type(document).__name__}"
        )

    try:
        if _is_open_weather(document):
            response = OpenWeatherResponse.model_validate(document)
            current = response.weather[0]
            return WeatherSnapshot(
                condition=current.main,
                temperature=response.main.temp,
                unit=unit,
                fetched_at=fetched_at,
                description=current.description,
                location=response.name,
            )

        simple = SimpleWeather.model_validate(document)
    except ValidationError as exc:
        raise WeatherParseError(
            f"Unexpected weather payload: {exc.error_count()} error(s)"
        ) from exc

    return WeatherSnapshot(
        condition=simple.condition,
        temperature=simple.temperature,
        unit=unit,
        fetched_at=fetched_at,
        description=simple.description,
    )
