"""Weather endpoint client.

Owns the weather cache for the life of the process. ``poll()`` never
blocks on the network and never raises: a due refresh runs as a background
task, fetch and parse failures are absorbed into the cache state, and the
last good snapshot keeps being served while a fetch is outstanding.
"""

import asyncio
import http.client
import urllib.request
from collections.abc import Callable

from piclock.lib.clock import Clock
from piclock.lib.config import WeatherSettings
from piclock.lib.exceptions import WeatherError, WeatherFetchError
from piclock.logging import get_logger
from piclock.weather.models import WeatherCacheState, WeatherSnapshot
from piclock.weather.payload import parse_weather
from piclock.weather.schedule import (
    PollAction,
    plan_poll,
    record_failure,
    record_success,
    visible_snapshot,
)

logger = get_logger("weather.client")

type Fetcher = Callable[[str, float], bytes]


def http_get(url: str, timeout: float) -> bytes:
    """Fetch ``url`` and return the raw body.

    Raises:
        WeatherFetchError: If the endpoint answers with a non-200 status.
        OSError: On connection errors and timeouts.
    """
    req = urllib.request.Request(url, headers={"Accept": "application/json"})
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        if resp.status != 200:
            raise WeatherFetchError(f"Weather endpoint returned status {resp.status}")
        return resp.read()


class WeatherClient:
    """Fetches weather at its own cadence and caches the last success."""

    def __init__(
        self,
        settings: WeatherSettings,
        clock: Clock,
        fetch: Fetcher | None = None,
    ) -> None:
        self._settings = settings
        self._clock = clock
        self._fetch = fetch or http_get
        self._state = WeatherCacheState()
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> WeatherCacheState:
        return self._state

    @property
    def refreshing(self) -> bool:
        """True while a fetch is outstanding."""
        return self._task is not None and not self._task.done()

    async def poll(self, now: float) -> WeatherSnapshot | None:
        """Return the weather to show at monotonic time ``now``.

        Starts a background refresh when the schedule allows it and none
        is outstanding. Returns None until the first fetch has succeeded.
        """
        if self._task is not None and self._task.done():
            task, self._task = self._task, None
            # Re-raise anything unexpected that escaped the refresh
            task.result()

        if self._task is None and plan_poll(self._state, now) == PollAction.FETCH:
            self._task = asyncio.create_task(self._refresh(), name="weather-refresh")
        return visible_snapshot(self._state, now, self._settings)

    async def wait_refreshed(self) -> None:
        """Wait for the outstanding fetch, if any, to finish."""
        if self._task is not None:
            await asyncio.wait({self._task})

    async def close(self) -> None:
        """Cancel an outstanding fetch."""
        if self.refreshing:
            self._task.cancel()
            await asyncio.wait({self._task})
        self._task = None

    async def _refresh(self) -> None:
        cfg = self._settings
        try:
            body = await asyncio.wait_for(
                asyncio.to_thread(self._fetch, cfg.url, cfg.timeout_sec),
                timeout=cfg.timeout_sec,
            )
            snapshot = parse_weather(
                body, unit=cfg.units, fetched_at=self._clock.now()
            )
        except (OSError, TimeoutError, http.client.HTTPException, WeatherError) as e:
            now = self._clock.monotonic()
            self._state = record_failure(self._state, now, cfg)
            logger.warning(
                "Weather refresh failed (%d in a row): %s. Next attempt in %.0fs",
                self._state.failures,
                str(e) or type(e).__name__,
                self._state.next_eligible_at - now,
            )
            return

        self._state = record_success(
            self._state, snapshot, self._clock.monotonic(), cfg
        )
        logger.info("Weather updated: %s", snapshot)
