"""
GraphQL client for the Builder.io content API.
Issues queries over httpx and maps failures onto FetchFailure subclasses.
"""

import json
from typing import Any, Dict, Optional

import httpx

from builder_pages.config import ApiConfig, get_config
from builder_pages.utils.logging_config import get_logger
from builder_pages.utils.exceptions import (
    BuilderAPIError,
    GraphQLQueryError,
    NetworkTimeoutError,
    RateLimitExceededError,
)

logger = get_logger("client")


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class GraphQLClient:
    """
    Async GraphQL client bound to one endpoint.

    Queries are sent as GET requests by default so the CDN in front of the
    content API can cache them.
    """

    def __init__(
        self,
        api_config: Optional[ApiConfig] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_config: API settings. If None, uses the global config.
            timeout: Request timeout in seconds (overrides the config)
            transport: Optional httpx transport (used by tests)
        """
        self._api = api_config or get_config().api
        self._endpoint = self._api.endpoint

        if timeout is None:
            timeout = self._api.timeout

        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=self._api.connect_timeout),
            headers={
                "User-Agent": "BuilderPages/1.0",
                "Accept": "application/json",
            },
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def aclose(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def _send(self, query: str, variables: Optional[Dict[str, Any]]) -> httpx.Response:
        if self._api.use_get_for_queries:
            params = {"query": query}
            if variables:
                params["variables"] = json.dumps(variables)
            return await self.client.get(self._endpoint, params=params)

        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables
        return await self.client.post(self._endpoint, json=payload)

    async def query(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a GraphQL query.

        Args:
            query: GraphQL document
            variables: Optional query variables

        Returns:
            The response's ``data`` mapping

        Raises:
            RateLimitExceededError: HTTP 429
            BuilderAPIError: any other HTTP error status
            NetworkTimeoutError: timeout or connection failure
            GraphQLQueryError: response carried GraphQL errors or no data
        """
        try:
            response = await self._send(query, variables)
            response.raise_for_status()

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429:
                logger.warning("Rate limit exceeded querying content API")
                raise RateLimitExceededError(
                    retry_after=_parse_retry_after(e.response.headers.get("Retry-After")),
                    endpoint=self._endpoint,
                    response_body=e.response.text,
                ) from e
            raise BuilderAPIError(
                f"Content API returned HTTP {status}",
                status_code=status,
                endpoint=self._endpoint,
                response_body=e.response.text,
            ) from e

        except httpx.TimeoutException as e:
            raise NetworkTimeoutError(
                endpoint=self._endpoint,
                timeout_seconds=self._api.timeout,
            ) from e

        except httpx.TransportError as e:
            raise NetworkTimeoutError(
                f"Connection to content API failed: {e}",
                endpoint=self._endpoint,
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise GraphQLQueryError(
                "Content API response was not valid JSON",
                endpoint=self._endpoint,
            ) from e

        errors = payload.get("errors")
        if errors:
            messages = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            )
            raise GraphQLQueryError(
                f"GraphQL query failed: {messages}",
                errors=errors,
                endpoint=self._endpoint,
            )

        data = payload.get("data")
        if data is None:
            raise GraphQLQueryError("GraphQL response contained no data", endpoint=self._endpoint)

        return data
