"""Tests for the lux to brightness mapping."""

import math

import pytest

from piclock.lib.config import BrightnessCurve, BrightnessSettings
from piclock.light import BrightnessController, BrightnessSample, normalize_lux

EXTREME_LUX = [
    -math.inf,
    -100.0,
    0.0,
    0.0001,
    0.5,
    1.0,
    3.4,
    10.0,
    25.0,
    49.9,
    50.0,
    100.0,
    10_000.0,
    math.inf,
]


def _sample(lux: float) -> BrightnessSample:
    return BrightnessSample(lux=lux, captured_at=0.0)


class TestNormalizeLux:
    def test_linear_bounds(self):
        assert normalize_lux(1, 1, 50) == 0.0
        assert normalize_lux(50, 1, 50) == 1.0
        assert normalize_lux(25.5, 1, 50) == pytest.approx(0.5)

    def test_clamps(self):
        assert normalize_lux(-5, 1, 50) == 0.0
        assert normalize_lux(500, 1, 50) == 1.0

    def test_nan_is_dark(self):
        assert normalize_lux(math.nan, 1, 50) == 0.0

    def test_log_curve(self):
        assert normalize_lux(10, 1, 100, BrightnessCurve.LOG) == pytest.approx(0.5)
        assert normalize_lux(1, 1, 100, BrightnessCurve.LOG) == 0.0
        assert normalize_lux(100, 1, 100, BrightnessCurve.LOG) == 1.0

    def test_log_curve_favours_low_light(self):
        linear = normalize_lux(5, 1, 50)
        log = normalize_lux(5, 1, 50, BrightnessCurve.LOG)

        assert log > linear


class TestBrightnessController:
    """Tests for the brightness level mapping."""

    def test_default_range(self):
        controller = BrightnessController(BrightnessSettings())

        assert controller.level_for(_sample(1)) == 1
        assert controller.level_for(_sample(50)) == 100
        assert controller.level_for(_sample(0)) == 1

    def test_custom_bounds(self):
        controller = BrightnessController(
            BrightnessSettings(min_level=10, max_level=60, min_lux=0, max_lux=100)
        )

        assert controller.level_for(_sample(0)) == 10
        assert controller.level_for(_sample(50)) == 35
        assert controller.level_for(_sample(1000)) == 60

    def test_without_sensor_uses_default(self):
        controller = BrightnessController(
            BrightnessSettings(default_level=42), uses_sensor=False
        )

        assert not controller.uses_sensor
        for lux in EXTREME_LUX:
            assert controller.level_for(_sample(lux)) == 42

    def test_shutdown_level(self):
        controller = BrightnessController(BrightnessSettings(shutdown_level=3))

        assert controller.shutdown_level == 3

    @pytest.mark.parametrize("curve", list(BrightnessCurve))
    @pytest.mark.parametrize(
        ("min_level", "max_level"), [(1, 100), (0, 0), (20, 80), (100, 100)]
    )
    def test_monotonic_and_bounded(self, curve, min_level, max_level):
        controller = BrightnessController(
            BrightnessSettings(
                min_level=min_level,
                max_level=max_level,
                default_level=min_level,
                min_lux=1,
                max_lux=50,
                curve=curve,
            )
        )

        levels = [controller.level_for(_sample(lux)) for lux in EXTREME_LUX]

        assert levels == sorted(levels)
        assert all(min_level <= level <= max_level for level in levels)

    def test_nan_reading_is_bounded(self):
        controller = BrightnessController(BrightnessSettings())

        assert controller.level_for(_sample(math.nan)) == 1
