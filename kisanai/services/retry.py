import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from kisanai.errors import AdvisoryError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]


async def retry_async(
    operation: Callable[[int], Awaitable[T]],
    max_attempts: int = 2,
    base_delay: float = 1.0,
    sleep: Optional[SleepFn] = None,
) -> T:
    """
    Run ``operation(attempt)`` until it succeeds or the attempt budget is spent.

    Between attempts the controller waits ``base_delay × attempt`` seconds.
    Errors flagged as non-retryable stop the loop immediately. When every
    attempt fails, the last error is re-raised unchanged.
    """
    sleep = sleep or asyncio.sleep
    attempts = max(1, max_attempts)
    last_error: Optional[AdvisoryError] = None

    for attempt in range(1, attempts + 1):
        try:
            return await operation(attempt)
        except AdvisoryError as e:
            last_error = e
            logger.error(f"Attempt {attempt} failed: {e.message}")
            if not e.retryable:
                logger.error(f"{e.code} is not retryable, giving up")
                break
            if attempt == attempts:
                break
            delay = base_delay * attempt
            logger.warning(f"Retrying in {delay:.1f}s ({attempt}/{attempts})")
            await sleep(delay)

    raise last_error
