"""Generic async fixed-cadence service.

Subclasses gather one cycle's output in ``poll()`` and deliver it in
``publish()``. The loop keeps ticks aligned to the cadence, survives any
exception escaping a cycle, and always runs ``cleanup()`` on the way out.
"""
import asyncio
import signal
from abc import ABC, abstractmethod
from contextlib import suppress

from piclock.logging import get_logger

_SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class PollingService[T](ABC):
    """Abstract base class for fixed-cadence async services.

    A cycle that overruns its slot is logged and the next one starts
    immediately; missed slots are not replayed.
    """

    def __init__(self, name: str, frequency_sec: float) -> None:
        """Initialize the service.

        Args:
            name: Service name for logging.
            frequency_sec: Time between the starts of two cycles.
        """
        self.name = name
        self.frequency_sec = frequency_sec
        self._stop = asyncio.Event()
        self._logger = get_logger(f"polling.{name}")

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare resources before the first cycle."""

    @abstractmethod
    async def cleanup(self) -> None:
        """Release resources. Runs even when the loop fails."""

    @abstractmethod
    async def poll(self) -> T | None:
        """Gather the data for one cycle.

        Returns:
            The cycle's output, or None to skip publishing.
        """

    @abstractmethod
    async def publish(self, output: T) -> None:
        """Deliver the output of ``poll()``."""

    @property
    def shutdown_requested(self) -> bool:
        return self._stop.is_set()

    def request_shutdown(self) -> None:
        """Stop after the current cycle, waking the loop if it is idle."""
        self._stop.set()

    def on_poll_error(self, error: Exception) -> None:
        """Handle an error that escaped a cycle. Default logs it."""
        self._logger.exception("%s cycle failed: %s", self.name, error)

    def _handle_signal(self, signum: int) -> None:
        self._logger.info(
            "Received %s, initiating graceful shutdown...",
            signal.Signals(signum).name,
        )
        self.request_shutdown()

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for signum in _SHUTDOWN_SIGNALS:
            loop.add_signal_handler(signum, self._handle_signal, signum)

    async def poll_cycle(self) -> None:
        """Execute a single poll → publish cycle."""
        output = await self.poll()
        if output is not None:
            await self.publish(output)

    async def _wait(self, seconds: float) -> None:
        """Sleep until the next slot or until shutdown is requested."""
        with suppress(TimeoutError):
            await asyncio.wait_for(self._stop.wait(), timeout=seconds)

    async def _run_loop(self) -> None:
        """Run cycles until shutdown, then clean up."""
        await self.initialize()
        self._logger.info("%s service started", self.name)

        loop = asyncio.get_running_loop()
        try:
            while not self._stop.is_set():
                cycle_start = loop.time()

                try:
                    await self.poll_cycle()
                except Exception as e:
                    self.on_poll_error(e)

                elapsed = loop.time() - cycle_start
                if elapsed > self.frequency_sec:
                    self._logger.debug(
                        "%s cycle took %.3fs (budget %.3fs)",
                        self.name,
                        elapsed,
                        self.frequency_sec,
                    )
                    continue
                if not self._stop.is_set():
                    await self._wait(self.frequency_sec - elapsed)
        finally:
            self._logger.info("Cleaning up resources...")
            await self.cleanup()
            self._logger.info("%s shutdown complete", self.name)

    async def _main(self) -> None:
        self._install_signal_handlers()
        await self._run_loop()

    def run(self) -> None:
        """Run the service until SIGTERM or SIGINT."""
        asyncio.run(self._main())
