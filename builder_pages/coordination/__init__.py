"""
Coordination module - round-by-round fetching with retries.
"""

from builder_pages.coordination.coordinator import BuildStats, PageCoordinator
from builder_pages.coordination.executor import RetryingFetchExecutor

__all__ = [
    "BuildStats",
    "PageCoordinator",
    "RetryingFetchExecutor",
]
