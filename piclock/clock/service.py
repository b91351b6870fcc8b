"""Render the time and weather once per tick, dimmed to the ambient light.

Each tick reads the clock, lets the weather client start a background refresh
when its own schedule allows it, samples the light sensor at its own (slower)
cadence, then renders a fresh frame on every configured display. A failing
display or sensor is logged and retried on the next tick; it never stops the loop.
"""

import asyncio
import sys
from collections.abc import Sequence
from contextlib import suppress
from typing import override

from pydantic import ValidationError

from piclock.clock.layout import compose_frame
from piclock.display.models import DisplayFrame
from piclock.display.protocol import DisplayProtocol
from piclock.lib.clock import Clock, SystemClock
from piclock.lib.config import (
    DisplayBackend,
    LightSensorKind,
    Settings,
    get_settings,
)
from piclock.lib.exceptions import ConfigurationError, DisplayError, SensorError
from piclock.lib.polling import PollingService
from piclock.lib.retry import with_retry
from piclock.light.brightness import BrightnessController
from piclock.light.models import BrightnessSample
from piclock.light.sensor import LightSensorProtocol
from piclock.logging import configure, get_logger
from piclock.weather.client import WeatherClient

logger = get_logger("clock.service")

type RenderBatch = list[tuple[DisplayProtocol, DisplayFrame]]


class ClockService(PollingService[RenderBatch]):
    """Fixed-cadence loop driving the displays."""

    def __init__(
        self,
        displays: Sequence[DisplayProtocol],
        weather: WeatherClient,
        light_sensor: LightSensorProtocol,
        controller: BrightnessController,
        clock: Clock,
        *,
        tick_sec: float = 1.0,
        page_duration_sec: int = 3,
        light_poll_interval_sec: float = 5.0,
    ) -> None:
        super().__init__(name="Clock", frequency_sec=tick_sec)
        self._displays = list(displays)
        self._weather = weather
        self._light_sensor = light_sensor
        self._controller = controller
        self._clock = clock
        self._page_duration_sec = page_duration_sec
        self._light_poll_interval_sec = light_poll_interval_sec
        self._next_light_at = 0.0
        self._level = controller.default_level
        self._failing: set[int] = set()

    @property
    def brightness_level(self) -> int:
        """Level applied on the last tick."""
        return self._level

    @override
    async def initialize(self) -> None:
        """Clear every display, retrying transient bus errors."""
        for display in self._displays:
            ok = await with_retry(
                display.clear,
                name=f"{display.name} display",
                logger=logger,
                max_retries=3,
                initial_backoff_sec=1.0,
                retryable_exceptions=(DisplayError,),
                run_in_thread=True,
            )
            if not ok:
                logger.warning(
                    "%s display did not clear at startup, rendering anyway",
                    display.name,
                )

    @override
    async def cleanup(self) -> None:
        """Dim the displays to the shutdown level and release the hardware."""
        await self._weather.close()
        level = self._controller.shutdown_level
        for display in self._displays:
            try:
                display.set_brightness(level)
            except DisplayError as e:
                logger.warning("Could not dim %s display: %s", display.name, e)
            try:
                display.close()
            except DisplayError as e:
                logger.warning("Could not close %s display: %s", display.name, e)
        try:
            self._light_sensor.close()
        except SensorError as e:
            logger.warning("Could not close light sensor: %s", e)

    async def _update_brightness(self, now: float) -> int:
        """Sample the light sensor if its interval has elapsed."""
        if not self._controller.uses_sensor or now < self._next_light_at:
            return self._level

        self._next_light_at = now + self._light_poll_interval_sec
        try:
            lux = await asyncio.to_thread(self._light_sensor.read_lux)
        except SensorError as e:
            logger.warning("Light sensor read failed, holding brightness: %s", e)
            return self._level

        level = self._controller.level_for(BrightnessSample(lux=lux, captured_at=now))
        if level != self._level:
            logger.debug("Brightness %d -> %d (%.1f lux)", self._level, level, lux)
        return level

    @override
    async def poll(self) -> RenderBatch | None:
        """Build one frame per display for the current tick."""
        now = self._clock.now()
        monotonic_now = self._clock.monotonic()

        snapshot = await self._weather.poll(monotonic_now)
        self._level = await self._update_brightness(monotonic_now)

        return [
            (
                display,
                compose_frame(
                    now,
                    snapshot,
                    display.geometry,
                    self._level,
                    self._page_duration_sec,
                ),
            )
            for display in self._displays
        ]

    @override
    async def publish(self, output: RenderBatch) -> None:
        """Render then set brightness on each display independently."""
        for index, (display, frame) in enumerate(output):
            errors: list[DisplayError] = []
            try:
                display.render(frame)
            except DisplayError as e:
                errors.append(e)
            try:
                display.set_brightness(frame.brightness)
            except DisplayError as e:
                errors.append(e)

            if errors:
                self._mark_failing(index, display, errors[0])
            else:
                self._mark_healthy(index, display)

    def _mark_failing(
        self, index: int, display: DisplayProtocol, error: DisplayError
    ) -> None:
        if index in self._failing:
            logger.debug("%s display still failing: %s", display.name, error)
            return
        self._failing.add(index)
        logger.warning("%s display error: %s", display.name, error)

    def _mark_healthy(self, index: int, display: DisplayProtocol) -> None:
        if index in self._failing:
            self._failing.discard(index)
            logger.info("%s display recovered", display.name)


def _create_displays(settings: Settings) -> list[DisplayProtocol]:
    """Create displays based on configuration."""
    displays: list[DisplayProtocol] = []
    try:
        for backend in settings.display.backends:
            if backend == DisplayBackend.MOCK:
                from piclock.lib.mock import MockDisplay

                cfg = settings.mock_display
                displays.append(MockDisplay(cols=cfg.cols, rows=cfg.rows))
            elif backend == DisplayBackend.ALPHANUM:
                from piclock.display.alphanum import AlphanumDisplay

                displays.append(AlphanumDisplay(settings.alphanum))
            elif backend == DisplayBackend.LCD:
                from piclock.display.lcd import LCDDisplay

                displays.append(LCDDisplay(settings.lcd))
    except ConfigurationError:
        for display in displays:
            with suppress(DisplayError):
                display.close()
        raise
    return displays


def _create_light_sensor(settings: Settings, clock: Clock) -> LightSensorProtocol:
    """Create the light source based on configuration."""
    light = settings.light
    brightness = settings.brightness
    if light.sensor == LightSensorKind.VEML7700:
        from piclock.light.sensor import VEML7700Sensor

        return VEML7700Sensor()
    if light.sensor == LightSensorKind.TIME:
        from piclock.light.sensor import TimeOfDayLightSensor

        return TimeOfDayLightSensor(clock, brightness.min_lux, brightness.max_lux)
    if light.sensor == LightSensorKind.RANDOM:
        from piclock.lib.mock import RandomLightSensor

        logger.info("Using random light sensor")
        return RandomLightSensor(brightness.min_lux, brightness.max_lux)

    from piclock.lib.mock import MockLightSensor

    if light.sensor == LightSensorKind.MOCK:
        logger.info("Using mock light sensor (%.1f lux)", light.mock_lux)
        return MockLightSensor(light.mock_lux)
    # Never read: the controller holds the default level
    return MockLightSensor()


def build_service(settings: Settings) -> ClockService:
    """Wire every component from the settings.

    Raises:
        ConfigurationError: If a selected device cannot be opened.
    """
    clock = SystemClock(settings.clock.timezone)
    light_sensor = _create_light_sensor(settings, clock)
    try:
        displays = _create_displays(settings)
    except ConfigurationError:
        with suppress(SensorError):
            light_sensor.close()
        raise

    return ClockService(
        displays,
        WeatherClient(settings.weather, clock),
        light_sensor,
        BrightnessController(
            settings.brightness,
            uses_sensor=settings.light.sensor != LightSensorKind.NONE,
        ),
        clock,
        tick_sec=settings.clock.tick_sec,
        page_duration_sec=settings.clock.page_duration_sec,
        light_poll_interval_sec=settings.light.poll_interval_sec,
    )


def main() -> None:
    """Main entry point for the clock service."""
    try:
        settings = get_settings()
    except ValidationError as e:
        configure()
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    configure(settings.log_level.upper())
    try:
        service = build_service(settings)
    except ConfigurationError as e:
        logger.error("Startup failed: %s", e)
        sys.exit(1)

    service.run()


if __name__ == "__main__":
    main()
