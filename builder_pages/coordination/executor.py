"""
RetryingFetchExecutor - runs one round's query with bounded retries.

Every attempt sends the identical query, so a retry is an idempotent
re-read of the same round and never touches pagination state.
"""

from typing import Any, Awaitable, Callable, Dict, Optional

from builder_pages.config import RetryConfig
from builder_pages.utils.exceptions import FetchFailure
from builder_pages.utils.logging_config import get_logger
from builder_pages.utils.retry import RetryContext

logger = get_logger("executor")

QueryFn = Callable[[str], Awaitable[Dict[str, Any]]]


class RetryingFetchExecutor:
    """Executes round queries, retrying any failure up to the attempt budget."""

    def __init__(
        self,
        query_fn: QueryFn,
        field_name: str,
        retry_config: Optional[RetryConfig] = None,
    ):
        """
        Args:
            query_fn: Coroutine function taking a GraphQL document and
                returning the response's data mapping
            field_name: Namespace field, used in diagnostics
            retry_config: Attempt budget and backoff settings
        """
        self._query_fn = query_fn
        self._field_name = field_name
        self._retry = retry_config or RetryConfig()
        self.total_attempts = 0

    @property
    def max_attempts(self) -> int:
        return self._retry.max_attempts

    def _new_context(self) -> RetryContext:
        return RetryContext(
            max_attempts=self._retry.max_attempts,
            base_delay=self._retry.base_delay,
            max_delay=self._retry.max_delay,
            exponential_base=self._retry.exponential_base,
            jitter=self._retry.jitter,
        )

    async def execute(self, query: str) -> Dict[str, Any]:
        """
        Run ``query``, retrying on failure.

        Returns:
            The data mapping of the first successful attempt

        Raises:
            Exception: the last attempt's error, unchanged, once the attempt
                budget is spent
        """
        ctx = self._new_context()

        for attempt in ctx:
            if attempt > 1:
                logger.warning(
                    f"Data fetching for {self._field_name} failed. "
                    f"Retrying: {attempt}/{ctx.max_attempts}"
                )

            self.total_attempts += 1
            try:
                return await self._query_fn(query)
            except Exception as e:
                if ctx.should_retry():
                    await ctx.handle_retry(e)
                    continue

                if isinstance(e, FetchFailure):
                    e.details["field_name"] = self._field_name
                    e.details["attempts"] = attempt
                logger.error(
                    f"Data fetching for {self._field_name} failed after "
                    f"{attempt} attempts: {e}"
                )
                raise

        raise RuntimeError("unreachable: retry loop exited without result")
