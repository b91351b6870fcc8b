"""Tests for the weather refresh schedule."""

import pytest

from piclock.lib.config import WeatherSettings
from piclock.weather import PollAction, WeatherCacheState, failure_backoff, plan_poll
from piclock.weather.schedule import (
    record_failure,
    record_success,
    visible_snapshot,
)
from tests.conftest import make_snapshot

CFG = WeatherSettings(
    url="http://weather.test/current", poll_interval_sec=600, max_backoff_sec=3600
)


class TestPlanPoll:
    def test_first_poll_fetches(self):
        assert plan_poll(WeatherCacheState(), now=0.0) == PollAction.FETCH

    def test_before_eligible_uses_cache(self):
        state = WeatherCacheState(next_eligible_at=100.0)

        assert plan_poll(state, now=99.9) == PollAction.USE_CACHE
        assert plan_poll(state, now=100.0) == PollAction.FETCH


class TestFailureBackoff:
    """Tests for the backoff after consecutive failures."""

    def test_doubles_from_base_interval(self):
        assert failure_backoff(1, CFG) == 600
        assert failure_backoff(2, CFG) == 1200
        assert failure_backoff(3, CFG) == 2400

    def test_capped(self):
        assert failure_backoff(4, CFG) == 3600
        assert failure_backoff(1000, CFG) == 3600

    def test_non_decreasing_and_bounded(self):
        delays = [failure_backoff(n, CFG) for n in range(1, 100)]

        assert delays == sorted(delays)
        assert all(CFG.poll_interval_sec <= d <= CFG.max_backoff_sec for d in delays)

    def test_cap_equal_to_base(self):
        cfg = WeatherSettings(url=CFG.url, poll_interval_sec=60, max_backoff_sec=60)

        assert [failure_backoff(n, cfg) for n in range(1, 5)] == [60, 60, 60, 60]


class TestRecord:
    def test_success_resets_failures(self):
        state = WeatherCacheState(failures=3, next_eligible_at=5000.0)
        snapshot = make_snapshot()

        state = record_success(state, snapshot, now=5000.0, cfg=CFG)

        assert state.snapshot is snapshot
        assert state.failures == 0
        assert state.last_success_at == 5000.0
        assert state.last_attempt_at == 5000.0
        assert state.next_eligible_at == 5600.0

    def test_failure_keeps_snapshot(self):
        snapshot = make_snapshot()
        state = record_success(WeatherCacheState(), snapshot, now=0.0, cfg=CFG)

        state = record_failure(state, now=600.0, cfg=CFG)

        assert state.snapshot is snapshot
        assert state.failures == 1
        assert state.last_success_at == 0.0
        assert state.last_attempt_at == 600.0
        assert state.next_eligible_at == 1200.0

    def test_consecutive_failures_back_off(self):
        state = WeatherCacheState()
        now = 0.0
        waits = []

        for _ in range(5):
            state = record_failure(state, now=now, cfg=CFG)
            waits.append(state.next_eligible_at - now)
            now = state.next_eligible_at

        assert waits == [600, 1200, 2400, 3600, 3600]

    def test_state_is_replaced_not_mutated(self):
        state = WeatherCacheState()

        new_state = record_failure(state, now=0.0, cfg=CFG)

        assert state.failures == 0
        assert new_state is not state

    @pytest.mark.parametrize(
        "outcomes",
        [
            "SFFS",
            "FFFS",
            "SSFF",
            "FSFSF",
            "SFSFFFS",
            "FFFF",
        ],
    )
    def test_cache_holds_latest_success(self, outcomes):
        state = WeatherCacheState()
        latest = None

        for i, outcome in enumerate(outcomes):
            now = float(i * 10_000)
            if outcome == "S":
                latest = make_snapshot(temperature=float(i))
                state = record_success(state, latest, now=now, cfg=CFG)
            else:
                state = record_failure(state, now=now, cfg=CFG)

            assert state.snapshot is latest


class TestVisibleSnapshot:
    def test_none_before_success(self):
        assert visible_snapshot(WeatherCacheState(), now=0.0, cfg=CFG) is None

    def test_cached_forever_by_default(self):
        snapshot = make_snapshot()
        state = record_success(WeatherCacheState(), snapshot, now=0.0, cfg=CFG)

        assert visible_snapshot(state, now=1e9, cfg=CFG) is snapshot

    def test_stale_cutoff(self):
        cfg = CFG.model_copy(update={"stale_after_sec": 1800})
        snapshot = make_snapshot()
        state = record_success(WeatherCacheState(), snapshot, now=0.0, cfg=cfg)

        assert visible_snapshot(state, now=1800.0, cfg=cfg) is snapshot
        assert visible_snapshot(state, now=1800.1, cfg=cfg) is None
        # Hidden, not discarded
        assert state.snapshot is snapshot
