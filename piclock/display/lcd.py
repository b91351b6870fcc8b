"""Character LCD display backend.

Provides an LCDDisplay class for rendering rows of text on an HD44780
character LCD connected via I2C (PCF8574 backpack), with an optional
PWM-dimmed backlight on a GPIO pin.
"""

from typing import Any, Self

from piclock.display.models import DisplayFrame, DisplayGeometry
from piclock.display.text import fit_rows
from piclock.lib.config import LCDSettings
from piclock.lib.exceptions import ConfigurationError, DisplayError
from piclock.logging import get_logger

logger = get_logger("display.lcd")

_PWM_FREQUENCY_HZ = 1000


class LCDDisplay:
    """HD44780 character LCD, written row by row."""

    name = "lcd"

    def __init__(self, settings: LCDSettings) -> None:
        """Initialize the display with I2C connection."""
        try:
            from RPLCD.i2c import CharLCD
        except ImportError as exc:
            raise ConfigurationError(
                "LCD display requires 'RPLCD' on Raspberry Pi."
            ) from exc

        try:
            self._lcd = CharLCD(
                i2c_expander="PCF8574",
                address=settings.i2c_address,
                port=1,
                cols=settings.cols,
                rows=settings.rows,
                charmap="A00",
                auto_linebreaks=False,
            )
        except OSError as exc:
            raise ConfigurationError(
                f"LCD not found at 0x{settings.i2c_address:02x}: {exc}"
            ) from exc

        self._geometry = DisplayGeometry(cols=settings.cols, rows=settings.rows)
        self._backlight: Any = None
        self._backlight_errors: tuple[type[Exception], ...] = (OSError,)
        if settings.backlight_pin is not None:
            self._backlight = self._open_backlight(settings.backlight_pin)

        logger.info(
            "LCD ready (%dx%d at 0x%02x)",
            settings.cols,
            settings.rows,
            settings.i2c_address,
        )

    def _open_backlight(self, pin: int) -> Any:
        """Claim the backlight PWM pin."""
        try:
            from gpiozero import GPIOZeroError, PWMOutputDevice
        except ImportError as exc:
            raise ConfigurationError(
                "LCD_BACKLIGHT_PIN requires 'gpiozero' on Raspberry Pi."
            ) from exc

        self._backlight_errors = (OSError, GPIOZeroError)
        try:
            return PWMOutputDevice(pin, frequency=_PWM_FREQUENCY_HZ)
        except self._backlight_errors as exc:
            raise ConfigurationError(
                f"Cannot drive LCD backlight on GPIO{pin}: {exc}"
            ) from exc

    @property
    def geometry(self) -> DisplayGeometry:
        return self._geometry

    def clear(self) -> None:
        """Clear the display."""
        try:
            self._lcd.clear()
        except OSError as exc:
            raise DisplayError(f"LCD clear failed: {exc}") from exc

    def render(self, frame: DisplayFrame) -> None:
        """Write each row from its first column."""
        try:
            for index, row in enumerate(fit_rows(frame.rows, self._geometry)):
                self._lcd.cursor_pos = (index, 0)
                self._lcd.write_string(row)
        except OSError as exc:
            raise DisplayError(f"LCD write failed: {exc}") from exc

    def set_brightness(self, level: int) -> None:
        """Dim the backlight, or switch it when there is no PWM pin."""
        if self._backlight is None:
            try:
                self._lcd.backlight_enabled = level > 0
            except OSError as exc:
                raise DisplayError(f"LCD backlight failed: {exc}") from exc
            return

        try:
            self._backlight.value = level / 100
        except self._backlight_errors as exc:
            raise DisplayError(f"LCD backlight PWM failed: {exc}") from exc

    def close(self) -> None:
        """Close the LCD connection and release the backlight pin."""
        try:
            self._lcd.close(clear=True)
        except OSError as exc:
            raise DisplayError(f"LCD close failed: {exc}") from exc
        finally:
            if self._backlight is not None:
                self._backlight.close()

    def __enter__(self) -> Self:
        """Enter context manager."""
        self.clear()
        return self

    def __exit__(self, *_: object) -> None:
        """Exit context manager."""
        self.close()
