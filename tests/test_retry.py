"""Tests for retry utilities."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from piclock.lib.exceptions import DisplayError
from piclock.lib.retry import backoff_delay, with_retry

logger = logging.getLogger("piclock.test.retry")


class TestBackoffDelay:
    def test_grows_exponentially(self):
        delays = [backoff_delay(n, initial_sec=2, max_sec=1000) for n in range(5)]

        assert delays == [2, 4, 8, 16, 32]

    def test_capped(self):
        assert backoff_delay(10, initial_sec=2, max_sec=30) == 30

    def test_huge_attempt_does_not_overflow(self):
        assert backoff_delay(10_000, initial_sec=600, max_sec=3600) == 3600

    def test_negative_attempt(self):
        assert backoff_delay(-1, initial_sec=5, max_sec=30) == 5

    def test_initial_above_cap(self):
        assert backoff_delay(0, initial_sec=60, max_sec=30) == 30

    def test_custom_factor(self):
        assert backoff_delay(2, initial_sec=1, max_sec=100, factor=3) == 9


class TestWithRetry:
    """Tests for the async retry helper."""

    @pytest.fixture(autouse=True)
    def no_sleep(self):
        with patch("piclock.lib.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
            yield sleep

    @pytest.mark.asyncio
    async def test_succeeds_first_time(self, no_sleep):
        fn = MagicMock()

        assert await with_retry(fn, name="clear", logger=logger) is True
        fn.assert_called_once()
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, no_sleep):
        fn = MagicMock(side_effect=[OSError("busy"), OSError("busy"), None])

        result = await with_retry(
            fn, name="clear", logger=logger, max_retries=3, initial_backoff_sec=2
        )

        assert result is True
        assert fn.call_count == 3
        assert [c.args[0] for c in no_sleep.await_args_list] == [2, 4]

    @pytest.mark.asyncio
    async def test_gives_up(self, no_sleep, caplog):
        fn = MagicMock(side_effect=OSError("busy"))

        result = await with_retry(fn, name="clear", logger=logger, max_retries=3)

        assert result is False
        assert fn.call_count == 3
        # No pointless wait after the last attempt
        assert no_sleep.await_count == 2
        assert "clear failed after 3 attempts" in caplog.text

    @pytest.mark.asyncio
    async def test_non_retryable_stops(self, no_sleep, caplog):
        fn = MagicMock(side_effect=KeyError("boom"))

        result = await with_retry(fn, name="clear", logger=logger)

        assert result is False
        fn.assert_called_once()
        assert "non-retryable" in caplog.text

    @pytest.mark.asyncio
    async def test_custom_retryable_exceptions(self):
        fn = MagicMock(side_effect=[DisplayError("bus"), None])

        result = await with_retry(
            fn, name="clear", logger=logger, retryable_exceptions=(DisplayError,)
        )

        assert result is True

    @pytest.mark.asyncio
    async def test_async_function(self):
        fn = AsyncMock(side_effect=[OSError("busy"), None])

        assert await with_retry(fn, name="send", logger=logger) is True
        assert fn.await_count == 2

    @pytest.mark.asyncio
    async def test_run_in_thread(self):
        fn = MagicMock()

        assert await with_retry(fn, name="clear", logger=logger, run_in_thread=True)
        fn.assert_called_once()

    @pytest.mark.asyncio
    async def test_backoff_capped(self, no_sleep):
        fn = MagicMock(side_effect=OSError("busy"))

        await with_retry(
            fn,
            name="clear",
            logger=logger,
            max_retries=5,
            initial_backoff_sec=10,
            max_backoff_sec=25,
        )

        assert [c.args[0] for c in no_sleep.await_args_list] == [10, 20, 25, 25]
