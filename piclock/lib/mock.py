"""Mock hardware for development and headless mode.

Provides stand-ins for the display and the light sensor that need no
hardware. Used when MOCK_HARDWARE=1 is set or the mock backend/sensor is
selected.
"""

import random
from typing import Self

from piclock.display.models import DisplayFrame, DisplayGeometry
from piclock.display.text import fit_rows
from piclock.logging import get_logger

logger = get_logger("lib.mock")


def _random_walk(
    current: float, drift: float, min_val: float, max_val: float
) -> float:
    """Generate next value using random walk with bounds."""
    change = random.gauss(0, drift)
    new_val = current + change
    return max(min_val, min(max_val, new_val))


class MockLightSensor:
    """Light source that always reports the same illuminance."""

    def __init__(self, lux: float = 25.0) -> None:
        self.lux = lux

    def read_lux(self) -> float:
        return self.lux

    def close(self) -> None:
        """No-op for mock sensor."""


class RandomLightSensor:
    """Light source that wanders between min_lux and max_lux."""

    def __init__(self, min_lux: float, max_lux: float) -> None:
        self._min_lux = min_lux
        self._max_lux = max_lux
        self._drift = (max_lux - min_lux) / 20
        self._lux = random.uniform(min_lux, max_lux)

    def read_lux(self) -> float:
        self._lux = _random_walk(
            self._lux, drift=self._drift, min_val=self._min_lux, max_val=self._max_lux
        )
        return round(self._lux, 2)

    def close(self) -> None:
        """No-op for mock sensor."""


class MockDisplay:
    """Headless display that records what it was asked to show.

    Always succeeds. Each new frame is logged as a boxed block of rows.
    """

    name = "mock"

    def __init__(self, cols: int = 16, rows: int = 2) -> None:
        self._geometry = DisplayGeometry(cols=cols, rows=rows)
        self.last_frame: DisplayFrame | None = None
        self.last_rows: tuple[str, ...] | None = None
        self.brightness: int | None = None
        self.render_count = 0
        logger.info("Mock display initialized (%dx%d)", cols, rows)

    @property
    def geometry(self) -> DisplayGeometry:
        return self._geometry

    def clear(self) -> None:
        self.last_rows = fit_rows((), self._geometry)

    def render(self, frame: DisplayFrame) -> None:
        rows = fit_rows(frame.rows, self._geometry)
        self.last_frame = frame
        self.render_count += 1
        if rows == self.last_rows:
            return
        self.last_rows = rows
        border = "-" * (self._geometry.cols + 2)
        body = "\n".join(f"|{row}|" for row in rows)
        logger.info("Mock display:\n%s\n%s\n%s", border, body, border)

    def set_brightness(self, level: int) -> None:
        if level != self.brightness:
            logger.debug("Mock display brightness: %d", level)
        self.brightness = level

    def close(self) -> None:
        logger.info("Mock display closed")

    def __enter__(self) -> Self:
        self.clear()
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
