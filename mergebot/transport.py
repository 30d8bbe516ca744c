"""
Async HTTP transport for the GitHub REST API.

Handles authenticated requests with automatic retry logic, rate-limit handling,
pagination and error mapping using the httpx async client.
"""

import asyncio
import random
import time
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from mergebot.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    MergeBotError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from mergebot.logging import log_http_request, log_http_response

if TYPE_CHECKING:
    from mergebot.auth import Auth

DEFAULT_BASE_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
USER_AGENT = "mergebot"


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class AsyncHTTPTransport:
    """
    Async HTTP transport layer for GitHub.

    Handles:
    - Authorization headers from a pluggable Auth object
    - Exponential backoff with jitter for retries
    - Retry-After / X-RateLimit-Reset respect for rate limiting
    - Link-header pagination
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        auth: "Auth | None" = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            auth: Supplies the Authorization header (None for anonymous calls)
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
        """
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": USER_AGENT,
            },
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make an authenticated request with automatic retry.

        Args:
            method: HTTP method
            path: API path (e.g., "/repos/octo/hello/pulls/1")
            params: Query parameters
            body: JSON request body (for POST/PUT/PATCH)

        Returns:
            Parsed JSON response, or None for empty responses

        Raises:
            MergeBotError: On API errors
        """
        response = await self._send(method, path, params=params, body=body)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        key: str | None = None,
    ) -> list[Any]:
        """
        Collect every page of a list endpoint.

        Args:
            path: API path of the first page
            params: Query parameters for the first page (per_page defaults to 100)
            key: Field holding the items when the endpoint wraps them
                (e.g. "check_runs"); None when the body is the list itself

        Returns:
            All items across pages, in API order
        """
        query: dict[str, Any] | None = {"per_page": 100, **(params or {})}
        url: str | None = path
        items: list[Any] = []

        while url:
            response = await self._send("GET", url, params=query)
            data = response.json()
            items.extend(data[key] if key else data)

            next_link = response.links.get("next")
            url = next_link["url"] if next_link else None
            # The next URL already carries the query string.
            query = None

        return items

    async def _send(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        async def make_request() -> httpx.Response:
            headers = await self.auth.headers() if self.auth else {}
            log_http_request(method, url, params=params, body=body)
            started = time.monotonic()
            response = await self._client.request(
                method, url, params=params, json=body, headers=headers
            )
            log_http_response(
                response.status_code,
                url,
                request_id=response.headers.get("X-GitHub-Request-Id"),
                elapsed_ms=(time.monotonic() - started) * 1000,
            )
            return response

        return await self._execute_with_retry(make_request)

    async def _execute_with_retry(
        self, request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]]
    ) -> httpx.Response:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            request_fn: Async function that makes the HTTP request

        Returns:
            The successful response

        Raises:
            MergeBotError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                response = await request_fn()

                if response.status_code < 400:
                    return response

                error = self._parse_error_response(response)

                # Secondary rate limits arrive as 403; retry them like 429.
                status_code = 429 if isinstance(error, RateLimitedError) else response.status_code
                if not self._should_retry(status_code, attempt):
                    raise error
                # A primary rate limit can stay exhausted for up to an hour.
                if (
                    isinstance(error, RateLimitedError)
                    and error.retry_after > self.retry_config.max_backoff
                ):
                    raise error

                last_error = error

                retry_after = (
                    str(error.retry_after) if isinstance(error, RateLimitedError) else None
                )
                wait_time = self._get_backoff_time(attempt, retry_after)
                await asyncio.sleep(wait_time)

            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                await asyncio.sleep(wait_time)

        # Should not reach here, but just in case
        if last_error:
            if isinstance(last_error, MergeBotError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting the server-provided
        delay if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Seconds to wait as sent by GitHub (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> MergeBotError:
        """
        Parse a GitHub error response into a typed exception.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate MergeBotError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        status_code = response.status_code
        message = data.get("message") or f"HTTP {status_code}"
        request_id = response.headers.get("X-GitHub-Request-Id")
        try:
            code = httpx.codes(status_code).name
        except ValueError:
            code = f"HTTP_{status_code}"

        rate_limited = status_code == 429 or (
            status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        )

        if rate_limited:
            return RateLimitedError(
                "RATE_LIMITED", message, self._retry_after_seconds(response), request_id
            )
        elif status_code == 401:
            return AuthenticationError(code, message, request_id)
        elif status_code == 403:
            return AuthorizationError(code, message, request_id)
        elif status_code == 404:
            return NotFoundError(code, message, request_id)
        elif status_code in (405, 409):
            return ConflictError(code, message, request_id)
        elif status_code >= 500:
            return ServerError(code, message, request_id)
        else:
            return ValidationError(code, message, request_id)

    @staticmethod
    def _retry_after_seconds(response: httpx.Response) -> int:
        """Seconds until the rate limit lifts, from Retry-After or X-RateLimit-Reset."""
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return int(retry_after)
            except ValueError:
                pass

        reset = response.headers.get("X-RateLimit-Reset")
        if reset:
            try:
                return max(int(reset) - int(time.time()), 0)
            except ValueError:
                pass

        return 60
