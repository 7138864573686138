"""
Custom exceptions for the Builder.io page builder.

Provides a hierarchy of exceptions so callers can tell configuration
problems apart from failures fetching a round of content.
"""

from typing import Optional, Dict, Any


class BuilderPagesError(Exception):
    """Base exception for all page builder errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        details = {k: v for k, v in self.details.items() if v is not None}
        if details:
            return f"{self.message} | Details: {details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(BuilderPagesError):
    """Raised when the page builder options are unusable (e.g. missing template)."""

    def __init__(self, message: str, model: Optional[str] = None, **kwargs):
        super().__init__(message, {"model": model, **kwargs})
        self.model = model


# =============================================================================
# Fetch Errors
# =============================================================================

class FetchFailure(BuilderPagesError):
    """Base exception for errors executing a round's GraphQL query."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        field_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, {"endpoint": endpoint, "field_name": field_name, **kwargs})
        self.endpoint = endpoint

    @property
    def field_name(self) -> Optional[str]:
        return self.details.get("field_name")

    @property
    def attempts(self) -> Optional[int]:
        return self.details.get("attempts")


class BuilderAPIError(FetchFailure):
    """Error status returned by the content API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        **kwargs
    ):
        super().__init__(
            message,
            status_code=status_code,
            response_body=response_body[:500] if response_body else None,
            **kwargs
        )
        self.status_code = status_code


class RateLimitExceededError(BuilderAPIError):
    """Rate limit exceeded (HTTP 429)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[float] = None,
        **kwargs
    ):
        super().__init__(message, status_code=429, retry_after=retry_after, **kwargs)
        self.retry_after = retry_after


class NetworkTimeoutError(FetchFailure):
    """Network request timed out or the connection failed."""

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_seconds: Optional[float] = None,
        **kwargs
    ):
        super().__init__(message, timeout_seconds=timeout_seconds, **kwargs)
        self.timeout_seconds = timeout_seconds


class GraphQLQueryError(FetchFailure):
    """The GraphQL response carried errors or no data."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, errors=errors, **kwargs)
        self.errors = errors or []
