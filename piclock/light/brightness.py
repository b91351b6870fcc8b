"""Map ambient light readings to display brightness levels."""

import math

from piclock.lib.config import BrightnessCurve, BrightnessSettings
from piclock.light.models import BrightnessSample


def normalize_lux(
    lux: float,
    min_lux: float,
    max_lux: float,
    curve: BrightnessCurve = BrightnessCurve.LINEAR,
) -> float:
    """Return a value between 0 and 1, clamping to min_lux/max_lux.

    NaN readings count as darkness.
    """
    if math.isnan(lux):
        return 0.0
    clamped = min(max(lux, min_lux), max_lux)
    if curve == BrightnessCurve.LOG:
        return math.log(clamped / min_lux) / math.log(max_lux / min_lux)
    return (clamped - min_lux) / (max_lux - min_lux)


class BrightnessController:
    """Pure lux → brightness level mapping.

    The mapping is monotonic non-decreasing in lux and always lands within
    the configured level bounds. Without a sensor every sample maps to the
    configured default level.
    """

    def __init__(
        self, settings: BrightnessSettings, *, uses_sensor: bool = True
    ) -> None:
        self._settings = settings
        self._uses_sensor = uses_sensor

    @property
    def uses_sensor(self) -> bool:
        return self._uses_sensor

    @property
    def default_level(self) -> int:
        return self._settings.default_level

    @property
    def shutdown_level(self) -> int:
        return self._settings.shutdown_level

    def level_for(self, sample: BrightnessSample) -> int:
        """Compute the brightness level for a light sample."""
        if not self._uses_sensor:
            return self._settings.default_level

        cfg = self._settings
        fraction = normalize_lux(sample.lux, cfg.min_lux, cfg.max_lux, cfg.curve)
        level = round(cfg.min_level + fraction * (cfg.max_level - cfg.min_level))
        return min(max(level, cfg.min_level), cfg.max_level)
