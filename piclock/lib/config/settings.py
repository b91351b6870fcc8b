"""Settings models and configuration loading for the Pi Clock application."""

from functools import cached_property, lru_cache
from typing import Annotated, Any, Self
from urllib.parse import urlencode
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    HttpUrl,
    SecretStr,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from piclock.lib.config.enums import (
    BrightnessCurve,
    DisplayBackend,
    LightSensorKind,
    TemperatureUnit,
)

OPEN_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


def _parse_bool(v: Any) -> bool:
    """Parse boolean from string '1'/'0' or actual bool."""
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        return v == "1"
    return bool(v)


def _parse_hex_int(v: Any) -> int:
    """Parse integer from string, supporting hex format (0x...)."""
    if isinstance(v, int):
        return v
    if isinstance(v, str):
        return int(v, 0)  # base 0 auto-detects hex/octal/decimal
    return int(v)


def _validate_http_url_or_empty(v: str) -> str:
    """Validate HTTP URL format, allowing empty string."""
    if not v:
        return v
    HttpUrl(v)
    return v


def parse_display_backends(raw: str) -> tuple[DisplayBackend, ...]:
    """Parse a comma-separated backend list, dropping duplicates.

    Raises:
        ValueError: If a name is not a known backend.
    """
    backends: list[DisplayBackend] = []
    for name in raw.split(","):
        name = name.strip().lower()
        if not name:
            continue
        backend = DisplayBackend(name)
        if backend not in backends:
            backends.append(backend)
    return tuple(backends)


_BoolFromStr = Annotated[bool, BeforeValidator(_parse_bool)]
_HexInt = Annotated[int, BeforeValidator(_parse_hex_int)]
_HttpUrlOrEmpty = Annotated[str, AfterValidator(_validate_http_url_or_empty)]
_Level = Annotated[int, Field(ge=0, le=100)]


class WeatherSettings(BaseModel):
    """Weather endpoint and refresh schedule."""

    model_config = ConfigDict(frozen=True)

    url: str
    units: TemperatureUnit = TemperatureUnit.IMPERIAL
    poll_interval_sec: float = 600.0
    timeout_sec: float = 10.0
    max_backoff_sec: float = 3600.0
    stale_after_sec: float = 0.0  # 0 keeps showing cached weather forever


class DisplaySettings(BaseModel):
    """Selected display backends."""

    model_config = ConfigDict(frozen=True)

    backends: tuple[DisplayBackend, ...] = (DisplayBackend.MOCK,)


class AlphanumSettings(BaseModel):
    """HT16K33 14-segment alphanumeric display settings."""

    model_config = ConfigDict(frozen=True)

    i2c_address: int = 0x70
    digits: int = 4


class LCDSettings(BaseModel):
    """HD44780 character LCD settings (I2C backpack)."""

    model_config = ConfigDict(frozen=True)

    i2c_address: int = 0x27  # Common addresses: 0x27 or 0x3F
    cols: int = 16
    rows: int = 2
    backlight_pin: int | None = None  # BCM pin driving a PWM backlight


class MockDisplaySettings(BaseModel):
    """Geometry of the headless display."""

    model_config = ConfigDict(frozen=True)

    cols: int = 16
    rows: int = 2


class LightSettings(BaseModel):
    """Ambient light source settings."""

    model_config = ConfigDict(frozen=True)

    sensor: LightSensorKind = LightSensorKind.NONE
    poll_interval_sec: float = 5.0
    mock_lux: float = 25.0


class BrightnessSettings(BaseModel):
    """Lux to brightness mapping."""

    model_config = ConfigDict(frozen=True)

    min_level: int = 1
    max_level: int = 100
    default_level: int = 5
    shutdown_level: int = 0
    min_lux: float = 1.0
    max_lux: float = 50.0
    curve: BrightnessCurve = BrightnessCurve.LINEAR


class ClockSettings(BaseModel):
    """Render cadence and time zone."""

    model_config = ConfigDict(frozen=True)

    tick_sec: float = 1.0
    page_duration_sec: int = 3
    timezone: str = ""  # Empty uses the system local zone


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Hardware
    mock_hardware: _BoolFromStr = False

    # Displays
    display_backends: str = "mock"
    alphanum_i2c_address: _HexInt = Field(default=0x70, ge=0x00, le=0x7F)
    alphanum_digits: int = Field(default=4, ge=1)
    lcd_i2c_address: _HexInt = Field(default=0x27, ge=0x00, le=0x7F)
    lcd_cols: int = Field(default=16, ge=1)
    lcd_rows: int = Field(default=2, ge=1)
    lcd_backlight_pin: int | None = Field(default=None, ge=0, le=27)
    mock_display_cols: int = Field(default=16, ge=1)
    mock_display_rows: int = Field(default=2, ge=1)

    # Weather
    weather_url: _HttpUrlOrEmpty = ""
    open_weather_api_key: SecretStr = SecretStr("")
    lat: float | None = Field(default=None, ge=-90, le=90)
    lon: float | None = Field(default=None, ge=-180, le=180)
    units: TemperatureUnit = TemperatureUnit.IMPERIAL
    weather_poll_interval_sec: float = Field(default=600.0, gt=0)
    weather_timeout_sec: float = Field(default=10.0, gt=0)
    weather_max_backoff_sec: float = Field(default=3600.0, gt=0)
    weather_stale_after_sec: float = Field(default=0.0, ge=0)

    # Light sensor
    light_sensor: LightSensorKind = LightSensorKind.NONE
    light_poll_interval_sec: float = Field(default=5.0, gt=0)
    mock_lux: float = Field(default=25.0, ge=0)

    # Brightness
    brightness_min: _Level = 1
    brightness_max: _Level = 100
    brightness_default: _Level = 5
    brightness_shutdown: _Level = 0
    min_lux: float = Field(default=1.0, ge=0)
    max_lux: float = Field(default=50.0, gt=0)
    brightness_curve: BrightnessCurve = BrightnessCurve.LINEAR

    # Clock
    tick_sec: float = Field(default=1.0, gt=0)
    page_duration_sec: int = Field(default=3, ge=1)
    timezone: str = ""

    log_level: str = "INFO"

    def _resolve_weather_url(self) -> str:
        """Return the explicit endpoint or build the OpenWeather one."""
        if self.weather_url:
            return self.weather_url
        query = urlencode(
            {
                "lat": self.lat,
                "lon": self.lon,
                "units": self.units.value,
                "appid": self.open_weather_api_key.get_secret_value(),
            }
        )
        return f"{OPEN_WEATHER_URL}?{query}"

    @cached_property
    def weather(self) -> WeatherSettings:
        """Get weather settings as nested object."""
        return WeatherSettings(
            url=self._resolve_weather_url(),
            units=self.units,
            poll_interval_sec=self.weather_poll_interval_sec,
            timeout_sec=self.weather_timeout_sec,
            max_backoff_sec=self.weather_max_backoff_sec,
            stale_after_sec=self.weather_stale_after_sec,
        )

    @cached_property
    def display(self) -> DisplaySettings:
        """Get display backend selection."""
        if self.mock_hardware:
            return DisplaySettings(backends=(DisplayBackend.MOCK,))
        return DisplaySettings(
            backends=parse_display_backends(self.display_backends)
        )

    @cached_property
    def alphanum(self) -> AlphanumSettings:
        """Get alphanumeric display settings."""
        return AlphanumSettings(
            i2c_address=self.alphanum_i2c_address,
            digits=self.alphanum_digits,
        )

    @cached_property
    def lcd(self) -> LCDSettings:
        """Get LCD display settings."""
        return LCDSettings(
            i2c_address=self.lcd_i2c_address,
            cols=self.lcd_cols,
            rows=self.lcd_rows,
            backlight_pin=self.lcd_backlight_pin,
        )

    @cached_property
    def mock_display(self) -> MockDisplaySettings:
        """Get headless display settings."""
        return MockDisplaySettings(
            cols=self.mock_display_cols, rows=self.mock_display_rows
        )

    @cached_property
    def light(self) -> LightSettings:
        """Get light source settings."""
        sensor = self.light_sensor
        if self.mock_hardware and sensor == LightSensorKind.VEML7700:
            sensor = LightSensorKind.MOCK
        return LightSettings(
            sensor=sensor,
            poll_interval_sec=self.light_poll_interval_sec,
            mock_lux=self.mock_lux,
        )

    @cached_property
    def brightness(self) -> BrightnessSettings:
        """Get brightness mapping settings."""
        return BrightnessSettings(
            min_level=self.brightness_min,
            max_level=self.brightness_max,
            default_level=self.brightness_default,
            shutdown_level=self.brightness_shutdown,
            min_lux=self.min_lux,
            max_lux=self.max_lux,
            curve=self.brightness_curve,
        )

    @cached_property
    def clock(self) -> ClockSettings:
        """Get clock cadence settings."""
        return ClockSettings(
            tick_sec=self.tick_sec,
            page_duration_sec=self.page_duration_sec,
            timezone=self.timezone,
        )

    @model_validator(mode="after")
    def validate_settings(self) -> Self:
        """Validate cross-field configuration constraints."""
        errors: list[str] = []

        if self.brightness_min > self.brightness_max:
            errors.append(
                f"BRIGHTNESS_MIN ({self.brightness_min}) must not exceed "
                f"BRIGHTNESS_MAX ({self.brightness_max})"
            )
        elif not (
            self.brightness_min
            <= self.brightness_default
            <= self.brightness_max
        ):
            errors.append(
                f"BRIGHTNESS_DEFAULT ({self.brightness_default}) must be "
                f"between {self.brightness_min} and {self.brightness_max}"
            )

        if self.min_lux >= self.max_lux:
            errors.append(
                f"MIN_LUX ({self.min_lux}) must be less than "
                f"MAX_LUX ({self.max_lux})"
            )
        if self.brightness_curve == BrightnessCurve.LOG and self.min_lux <= 0:
            errors.append("MIN_LUX must be positive with the log curve")

        if self.weather_max_backoff_sec < self.weather_poll_interval_sec:
            errors.append(
                f"WEATHER_MAX_BACKOFF_SEC ({self.weather_max_backoff_sec}) "
                "must not be less than WEATHER_POLL_INTERVAL_SEC "
                f"({self.weather_poll_interval_sec})"
            )
        if self.weather_timeout_sec >= self.weather_poll_interval_sec:
            errors.append(
                f"WEATHER_TIMEOUT_SEC ({self.weather_timeout_sec}) must be "
                "less than WEATHER_POLL_INTERVAL_SEC "
                f"({self.weather_poll_interval_sec})"
            )

        if not self.weather_url:
            missing = []
            if not self.open_weather_api_key.get_secret_value():
                missing.append("OPEN_WEATHER_API_KEY")
            if self.lat is None:
                missing.append("LAT")
            if self.lon is None:
                missing.append("LON")
            if missing:
                errors.append(
                    "WEATHER_URL is not set and OpenWeather is missing: "
                    + ", ".join(missing)
                )

        if not self.mock_hardware:
            try:
                backends = parse_display_backends(self.display_backends)
            except ValueError:
                errors.append(
                    f"DISPLAY_BACKENDS ({self.display_backends!r}) must list "
                    "only: " + ", ".join(b.value for b in DisplayBackend)
                )
            else:
                if not backends:
                    errors.append("DISPLAY_BACKENDS must name a backend")

        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                errors.append(f"TIMEZONE ({self.timezone!r}) is not known")

        if errors:
            raise ValueError(
                "Configuration validation failed:\n  - "
                + "\n  - ".join(errors)
            )

        return self


# Settings override for testing - allows injecting custom Settings without
# modifying environment variables or clearing the lru_cache.
_settings_override: Settings | None = None


@lru_cache(maxsize=1)
def _load_settings() -> Settings:
    """Load settings from environment (cached)."""
    return Settings()


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns the test override if set, otherwise loads from environment
    variables (cached after first load). For testing, use set_settings()
    from piclock.lib.config.testing to override.
    """
    if _settings_override is not None:
        return _settings_override
    return _load_settings()
