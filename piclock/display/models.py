"""Domain models for rendered display content."""

from dataclasses import dataclass

MIN_BRIGHTNESS = 0
MAX_BRIGHTNESS = 100


@dataclass(frozen=True, slots=True)
class DisplayGeometry:
    """Character capacity of a display."""

    cols: int
    rows: int

    def __post_init__(self) -> None:
        if self.cols < 1 or self.rows < 1:
            raise ValueError(
                f"geometry must be at least 1x1, got {self.cols}x{self.rows}"
            )


@dataclass(frozen=True, slots=True)
class DisplayFrame:
    """One tick's worth of display content.

    Rows are already fitted to the target geometry; a frame is never
    mutated, the next tick simply builds a new one.
    """

    rows: tuple[str, ...]
    brightness: int

    def __post_init__(self) -> None:
        if not MIN_BRIGHTNESS <= self.brightness <= MAX_BRIGHTNESS:
            raise ValueError(
                f"brightness must be between {MIN_BRIGHTNESS} and "
                f"{MAX_BRIGHTNESS}, got {self.brightness}"
            )

    @property
    def text(self) -> str:
        return "\n".join(self.rows)
