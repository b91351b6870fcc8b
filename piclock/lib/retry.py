"""Retry utilities with exponential backoff."""
import asyncio
import inspect
from collections.abc import Awaitable, Callable
from logging import Logger

# Exponents beyond this would overflow long before reaching any sane cap
_MAX_EXPONENT = 32


def backoff_delay(
    attempt: int,
    *,
    initial_sec: float,
    max_sec: float,
    factor: float = 2.0,
) -> float:
    """Return the wait before retry number ``attempt`` (0-based).

    The delay starts at ``initial_sec``, grows by ``factor`` per attempt and
    never exceeds ``max_sec``. It is non-decreasing in ``attempt``.
    """
    if attempt <= 0:
        return min(initial_sec, max_sec)
    exponent = min(attempt, _MAX_EXPONENT)
    return min(max_sec, initial_sec * factor**exponent)


async def with_retry(
    fn: Callable[[], None] | Callable[[], Awaitable[None]],
    *,
    name: str,
    logger: Logger,
    max_retries: int = 3,
    initial_backoff_sec: float = 2.0,
    max_backoff_sec: float = 30.0,
    retryable_exceptions: tuple[type[Exception], ...] = (OSError,),
    run_in_thread: bool = False,
) -> bool:
    """Execute a function with retry logic and exponential backoff.

    Args:
        fn: The function to execute. Can be sync or async.
        name: Name for logging purposes.
        logger: Logger instance to use.
        max_retries: Maximum number of attempts.
        initial_backoff_sec: Initial backoff delay in seconds (doubles each retry).
        max_backoff_sec: Upper bound for a single backoff delay.
        retryable_exceptions: Exception types that trigger a retry.
        run_in_thread: If True, run sync fn in a thread pool.

    Returns:
        True if the function succeeded, False otherwise.
    """
    last_error: Exception | None = None

    for attempt in range(max_retries):
        try:
            if run_in_thread:
                await asyncio.to_thread(fn)
            else:
                result = fn()
                if inspect.isawaitable(result):
                    await result
            return True
        except retryable_exceptions as e:
            last_error = e
            if attempt + 1 == max_retries:
                break
            backoff = backoff_delay(
                attempt, initial_sec=initial_backoff_sec, max_sec=max_backoff_sec
            )
            logger.warning(
                "%s attempt %d/%d failed: %s. Retrying in %.1fs...",
                name,
                attempt + 1,
                max_retries,
                e,
                backoff,
            )
            await asyncio.sleep(backoff)
        except Exception as e:
            logger.error("%s failed (non-retryable): %s", name, e)
            return False

    logger.error(
        "%s failed after %d attempts. Last error: %s",
        name,
        max_retries,
        last_error,
    )
    return False
