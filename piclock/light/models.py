"""Domain models for ambient light readings."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BrightnessSample:
    """A raw light reading and the monotonic time it was captured."""

    lux: float
    captured_at: float
