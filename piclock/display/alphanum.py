"""HT16K33 14-segment alphanumeric display backend.

Drives one or more chained 4-character Adafruit alphanumeric backpacks
over I2C. Consecutive backpacks are expected at consecutive addresses.
"""

from math import ceil
from typing import Self

from piclock.display.models import DisplayFrame, DisplayGeometry
from piclock.display.text import fit_row
from piclock.lib.config import AlphanumSettings
from piclock.lib.exceptions import ConfigurationError, DisplayError
from piclock.logging import get_logger

logger = get_logger("display.alphanum")

_CHARS_PER_BACKPACK = 4


def _printable(text: str) -> str:
    """Replace characters the segment font cannot draw with spaces."""
    return "".join(c if 32 <= ord(c) < 127 else " " for c in text)


class AlphanumDisplay:
    """Single-row segmented display."""

    name = "alphanum"

    def __init__(self, settings: AlphanumSettings) -> None:
        """Initialize the display with I2C connection."""
        try:
            import board
            import busio
            from adafruit_ht16k33.segments import Seg14x4
        except ImportError as exc:
            raise ConfigurationError(
                "Alphanumeric display requires 'adafruit-circuitpython-ht16k33' "
                "and 'adafruit-blinka' on Raspberry Pi."
            ) from exc

        backpacks = ceil(settings.digits / _CHARS_PER_BACKPACK)
        addresses = [settings.i2c_address + i for i in range(backpacks)]
        try:
            self._i2c = busio.I2C(board.SCL, board.SDA)
            self._segments = Seg14x4(
                self._i2c,
                address=addresses if backpacks > 1 else addresses[0],
                auto_write=False,
            )
        except (OSError, ValueError) as exc:
            raise ConfigurationError(
                f"Alphanumeric display not found at 0x{settings.i2c_address:02x}: {exc}"
            ) from exc

        self._geometry = DisplayGeometry(cols=settings.digits, rows=1)
        logger.info(
            "Alphanumeric display ready (%d chars at 0x%02x)",
            settings.digits,
            settings.i2c_address,
        )

    @property
    def geometry(self) -> DisplayGeometry:
        return self._geometry

    def clear(self) -> None:
        """Blank every segment."""
        try:
            self._segments.fill(0)
            self._segments.show()
        except OSError as exc:
            raise DisplayError(f"alphanumeric clear failed: {exc}") from exc

    def render(self, frame: DisplayFrame) -> None:
        """Write the frame's first row."""
        text = _printable(fit_row(frame.rows[0] if frame.rows else "", self._geometry.cols))
        try:
            self._segments.fill(0)
            self._segments.print(text)
            self._segments.show()
        except OSError as exc:
            raise DisplayError(f"alphanumeric write failed: {exc}") from exc

    def set_brightness(self, level: int) -> None:
        """Set dimming from a 0-100 level (the chip has 16 steps)."""
        try:
            self._segments.brightness = level / 100
        except OSError as exc:
            raise DisplayError(f"alphanumeric dimming failed: {exc}") from exc

    def close(self) -> None:
        """Blank the display and release the I2C bus."""
        try:
            self.clear()
        finally:
            try:
                self._i2c.deinit()
            except (OSError, RuntimeError) as exc:
                raise DisplayError(f"alphanumeric close failed: {exc}") from exc

    def __enter__(self) -> Self:
        """Enter context manager."""
        self.clear()
        return self

    def __exit__(self, *_: object) -> None:
        """Exit context manager."""
        self.close()
