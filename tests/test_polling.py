"""Tests for the generic polling service loop."""

import asyncio
import signal

import pytest

from piclock.lib.polling import PollingService


class CountingService(PollingService[int]):
    """Service that stops itself after a number of cycles."""

    def __init__(self, cycles=3, fail_on=(), skip_on=()):
        super().__init__(name="Counting", frequency_sec=0)
        self.cycles = cycles
        self.fail_on = set(fail_on)
        self.skip_on = set(skip_on)
        self.count = 0
        self.published = []
        self.events = []

    async def initialize(self):
        self.events.append("initialize")

    async def cleanup(self):
        self.events.append("cleanup")

    async def poll(self):
        self.count += 1
        if self.count >= self.cycles:
            self.request_shutdown()
        if self.count in self.fail_on:
            raise RuntimeError(f"cycle {self.count} failed")
        if self.count in self.skip_on:
            return None
        return self.count

    async def publish(self, output):
        self.published.append(output)


class TestPollingService:
    """Tests for the fixed-cadence loop."""

    @pytest.mark.asyncio
    async def test_runs_until_shutdown(self):
        service = CountingService(cycles=3)

        await service._run_loop()

        assert service.published == [1, 2, 3]
        assert service.events == ["initialize", "cleanup"]

    @pytest.mark.asyncio
    async def test_error_does_not_stop_loop(self, caplog):
        service = CountingService(cycles=3, fail_on={2})

        await service._run_loop()

        assert service.published == [1, 3]
        assert "cycle 2 failed" in caplog.text

    @pytest.mark.asyncio
    async def test_none_skips_publish(self):
        service = CountingService(cycles=3, skip_on={1})

        await service._run_loop()

        assert service.published == [2, 3]

    @pytest.mark.asyncio
    async def test_cleanup_runs_when_loop_aborts(self):
        class Abort(BaseException):
            pass

        class Exploding(CountingService):
            async def publish(self, output):
                raise Abort

        service = Exploding(cycles=10)

        with pytest.raises(Abort):
            await service._run_loop()

        assert service.events == ["initialize", "cleanup"]

    @pytest.mark.asyncio
    async def test_shutdown_wakes_idle_loop(self):
        service = CountingService(cycles=100)
        service.frequency_sec = 3600
        task = asyncio.create_task(service._run_loop())

        await asyncio.sleep(0.05)
        service.request_shutdown()
        await asyncio.wait_for(task, timeout=1)

        assert service.published == [1]
        assert service.events == ["initialize", "cleanup"]

    def test_signal_requests_shutdown(self, caplog):
        service = CountingService()

        service._handle_signal(signal.SIGTERM)

        assert service.shutdown_requested
        assert "Received SIGTERM" in caplog.text
