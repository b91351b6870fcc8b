"""Wall-clock and monotonic time sources."""

import time
from datetime import datetime
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Protocol for time sources used by the clock service."""

    def now(self) -> datetime: ...

    def monotonic(self) -> float: ...


class SystemClock:
    """Clock backed by the operating system.

    ``now()`` is always timezone-aware: in the configured zone when one is
    given, otherwise in the system local zone.
    """

    def __init__(self, timezone: str = "") -> None:
        self._tz = ZoneInfo(timezone) if timezone else None

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now().astimezone()
        return datetime.now(self._tz)

    def monotonic(self) -> float:
        return time.monotonic()
