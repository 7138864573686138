"""
Retry helper with exponential backoff for content API calls.

Provides the backoff schedule used between attempts of a fetch, with
jitter to avoid thundering herd problems.
"""

import asyncio
import random
from typing import Iterator, Optional

from builder_pages.utils.logging_config import get_logger

logger = get_logger("retry")


class RetryContext:
    """
    Retry bookkeeping for loops where a decorator isn't suitable.

    Example:
        >>> ctx = RetryContext(max_attempts=3)
        >>> for attempt in ctx:
        ...     try:
        ...         result = await fetch_data()
        ...         break
        ...     except httpx.TimeoutException as e:
        ...         if not ctx.should_retry():
        ...             raise
        ...         await ctx.handle_retry(e)
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter
        self.attempt = 0
        self.last_exception: Optional[Exception] = None

    def __iter__(self) -> Iterator[int]:
        for self.attempt in range(1, self.max_attempts + 1):
            yield self.attempt

    def should_retry(self) -> bool:
        """Check if another retry attempt is available."""
        return self.attempt < self.max_attempts

    def get_delay(self) -> float:
        """Calculate delay after the current attempt."""
        delay = min(
            self.base_delay * (self.exponential_base ** (self.attempt - 1)),
            self.max_delay
        )
        # +/-25% jitter
        if self.jitter:
            delay = delay * (0.75 + random.random() * 0.5)
        return max(0.0, delay)

    async def handle_retry(self, exception: Optional[Exception] = None) -> float:
        """
        Record the failure and sleep before the next attempt.

        Returns the delay that was used.
        """
        self.last_exception = exception
        delay = self.get_delay()

        retry_after = getattr(exception, "retry_after", None)
        if retry_after:
            delay = max(delay, float(retry_after))

        logger.debug(
            f"Attempt {self.attempt}/{self.max_attempts} failed: {exception}. "
            f"Sleeping {delay:.2f}s"
        )

        await asyncio.sleep(delay)
        return delay
