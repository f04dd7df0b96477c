"""Uniform retry policy for external calls."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRIES = 2
DEFAULT_DELAY = 2.0


async def call_with_retry(
    fn: Callable[[], Awaitable[T]],
    retries: int = DEFAULT_RETRIES,
    delay: float = DEFAULT_DELAY,
    label: Optional[str] = None,
) -> T:
    """Await ``fn()``, retrying every failure after a fixed delay.

    Args:
        fn: Zero-argument coroutine function performing the call.
        retries: Retries allowed after the first attempt.
        delay: Seconds to wait before each retry. Does not grow.
        label: Name used in log messages.

    Returns:
        Whatever ``fn`` returns on its first successful attempt.

    Raises:
        Exception: The last failure, unchanged, once the budget is spent.
    """
    name = label or getattr(fn, "__name__", "call")
    remaining = retries
    while True:
        try:
            return await fn()
        except Exception as e:
            if remaining <= 0:
                raise
            logger.warning(f"{name} failed, retrying in {delay:.1f}s ({remaining} left): {e}")
            remaining -= 1
            await asyncio.sleep(delay)
