"""
Utility modules for the Builder.io page builder.
"""

from builder_pages.utils.logging_config import get_logger, setup_file_logging
from builder_pages.utils.exceptions import (
    BuilderPagesError,
    ConfigurationError,
    FetchFailure,
    BuilderAPIError,
    RateLimitExceededError,
    NetworkTimeoutError,
    GraphQLQueryError,
)
from builder_pages.utils.retry import RetryContext

__all__ = [
    "get_logger",
    "setup_file_logging",
    "BuilderPagesError",
    "ConfigurationError",
    "FetchFailure",
    "BuilderAPIError",
    "RateLimitExceededError",
    "NetworkTimeoutError",
    "GraphQLQueryError",
    "RetryContext",
]
