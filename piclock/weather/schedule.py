"""Pure scheduling rules for weather refreshes.

Every function here maps ``(state, now)`` to a decision or a new state and
never touches the clock or the network, so the retry policy can be tested
without waiting.
"""

from dataclasses import replace
from enum import Enum, auto

from piclock.lib.config import WeatherSettings
from piclock.lib.retry import backoff_delay
from piclock.weather.models import WeatherCacheState, WeatherSnapshot


class PollAction(Enum):
    """What a poll should do at a given moment."""

    FETCH = auto()
    USE_CACHE = auto()


def plan_poll(state: WeatherCacheState, now: float) -> PollAction:
    """Decide whether ``now`` is eligible for a network fetch."""
    if now < state.next_eligible_at:
        return PollAction.USE_CACHE
    return PollAction.FETCH


def failure_backoff(failures: int, cfg: WeatherSettings) -> float:
    """Wait after ``failures`` consecutive failed fetches.

    Starts at the regular poll interval, doubles per further failure and
    is capped at ``max_backoff_sec``. Never shorter than the poll interval.
    """
    delay = backoff_delay(
        max(failures - 1, 0),
        initial_sec=cfg.poll_interval_sec,
        max_sec=cfg.max_backoff_sec,
    )
    return max(delay, cfg.poll_interval_sec)


def record_success(
    state: WeatherCacheState,
    snapshot: WeatherSnapshot,
    now: float,
    cfg: WeatherSettings,
) -> WeatherCacheState:
    """Cache a fresh snapshot and schedule the next regular poll."""
    return replace(
        state,
        snapshot=snapshot,
        last_attempt_at=now,
        last_success_at=now,
        failures=0,
        next_eligible_at=now + cfg.poll_interval_sec,
    )


def record_failure(
    state: WeatherCacheState, now: float, cfg: WeatherSettings
) -> WeatherCacheState:
    """Count a failed fetch, keeping the cached snapshot untouched."""
    failures = state.failures + 1
    return replace(
        state,
        last_attempt_at=now,
        failures=failures,
        next_eligible_at=now + failure_backoff(failures, cfg),
    )


def visible_snapshot(
    state: WeatherCacheState, now: float, cfg: WeatherSettings
) -> WeatherSnapshot | None:
    """Return the snapshot to show, honouring the optional stale cutoff."""
    if state.snapshot is None or state.last_success_at is None:
        return None
    if cfg.stale_after_sec and now - state.last_success_at > cfg.stale_after_sec:
        return None
    return state.snapshot
