"""Protocol implemented by every display backend."""

from typing import Protocol, Self

from piclock.display.models import DisplayFrame, DisplayGeometry


class DisplayProtocol(Protocol):
    """Protocol for display backends.

    ``render`` and ``set_brightness`` raise ``DisplayError`` when the
    underlying bus fails; the device stays usable for the next call.
    """

    name: str

    @property
    def geometry(self) -> DisplayGeometry: ...

    def clear(self) -> None: ...

    def render(self, frame: DisplayFrame) -> None: ...

    def set_brightness(self, level: int) -> None: ...

    def close(self) -> None: ...

    def __enter__(self) -> Self: ...

    def __exit__(self, *_: object) -> None: ...
