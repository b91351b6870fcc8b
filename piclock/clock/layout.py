"""Frame layouts for the supported display geometries.

Single-row displays keep the time on screen and rotate the weather field
beside it when there is room:

    12:34  64F  ->  12:34 Rain

Displays too narrow for both (the 4-digit alphanumeric) rotate whole pages
instead, so the time is shown one page in three:

    1234  ->   64F  ->  Rain

Two-row displays show everything at once::

    12:34     Cloudy
    Tue Mar 5   64°F

Four-row displays add the long description and the refresh time.
"""

from datetime import datetime

from piclock.display.models import DisplayFrame, DisplayGeometry
from piclock.display.text import abbreviate, fit_rows
from piclock.weather.models import WeatherSnapshot

PLACEHOLDER = "--"

# Fixed names so the layout does not depend on the process locale
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_PAGE_COUNT = 3
# Narrowest weather field shown beside the time on a single row
_MIN_FIELD_WIDTH = 3


def format_time(now: datetime, width: int) -> str:
    """Return ``HH:MM``, or ``HHMM`` when the colon does not fit."""
    if width < 5:
        return f"{now:%H%M}"
    return f"{now:%H:%M}"


def format_date(now: datetime) -> str:
    return f"{WEEKDAYS[now.weekday()]} {MONTHS[now.month - 1]} {now.day}"


def page_index(
    now: datetime, page_duration_sec: int, pages: int = _PAGE_COUNT
) -> int:
    """Return which single-row page is showing at ``now``."""
    return int(now.timestamp()) // page_duration_sec % pages


def _single_row(
    now: datetime,
    weather: WeatherSnapshot | None,
    cols: int,
    page_duration_sec: int,
) -> list[str]:
    if weather is None:
        return [format_time(now, cols)]

    clock_text = format_time(now, cols - _MIN_FIELD_WIDTH - 1)
    field_width = cols - len(clock_text) - 1
    if field_width >= _MIN_FIELD_WIDTH:
        if page_index(now, page_duration_sec, pages=2) == 0:
            field = f"{weather.rounded_temperature}{weather.unit.symbol}"
        else:
            field = abbreviate(weather.condition, field_width)
        return [f"{clock_text} {field.rjust(field_width)}"]

    page = page_index(now, page_duration_sec)
    if page == 1:
        temp = str(weather.rounded_temperature).rjust(cols - 1)
        return [f"{temp}{weather.unit.symbol}"]
    if page == 2:
        return [abbreviate(weather.condition, cols)]
    return [format_time(now, cols)]


def _multi_row(
    now: datetime, weather: WeatherSnapshot | None, geometry: DisplayGeometry
) -> list[str]:
    cols = geometry.cols
    clock_text = format_time(now, cols)
    date_text = format_date(now)
    condition_width = max(cols - len(clock_text) - 1, 0)

    if weather is None:
        condition = PLACEHOLDER
        temperature = PLACEHOLDER
    else:
        condition = abbreviate(weather.condition, condition_width)
        temperature = f"{weather.rounded_temperature:>3}°{weather.unit.symbol}"

    rows = [
        f"{clock_text} {condition.rjust(condition_width)}",
        f"{date_text} {temperature.rjust(cols - len(date_text) - 1)}",
    ]

    if geometry.rows >= 4:
        if weather is None:
            rows += [PLACEHOLDER, ""]
        else:
            rows += [
                (weather.description or weather.condition).capitalize(),
                f"Updated {weather.fetched_at:%H:%M}",
            ]
    return rows


def compose_frame(
    now: datetime,
    weather: WeatherSnapshot | None,
    geometry: DisplayGeometry,
    brightness: int,
    page_duration_sec: int = 3,
) -> DisplayFrame:
    """Lay out the time and weather for one display."""
    if geometry.rows == 1:
        rows = _single_row(now, weather, geometry.cols, page_duration_sec)
    else:
        rows = _multi_row(now, weather, geometry)
    return DisplayFrame(rows=fit_rows(rows, geometry), brightness=brightness)
