"""
HTTP Transport for reprac.

Handles async HTTP communication with the GitHub REST API, optional retry
logic, and error handling.
"""

import asyncio
import random
import time
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any

import httpx

from reprac.exceptions import (
    AuthenticationError,
    DecodeError,
    HTTPStatusError,
    NotFoundError,
    RateLimitedError,
    RepracError,
    ServerError,
    TransportError,
)
from reprac.logging import log_http_request, log_http_response

API_VERSION = "2022-11-28"


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior. Retries are off by default."""

    max_retries: int = 0
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [502, 503, 504])
    respect_retry_after: bool = True
    max_backoff: float = 30.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class HTTPTransport:
    """
    Async HTTP transport for read-only GitHub API calls.

    Handles:
    - Fixed ``Accept`` and API-version headers, bearer token when present
    - Bounded per-request timeout
    - Exponential backoff with jitter for retryable statuses
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 15.0,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: GitHub token; None means unauthenticated, rate-limited calls
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self._token = token or None

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
        )

    @property
    def has_auth(self) -> bool:
        return self._token is not None

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "HTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a GET request.

        Args:
            path: API path (e.g., "/repos/acme/web")
            params: Query parameters

        Returns:
            Parsed JSON response

        Raises:
            RepracError: On transport, HTTP status or decode errors
        """
        async def make_request() -> httpx.Response:
            log_http_request("GET", path, dict(self._client.headers), params)
            return await self._client.request("GET", path, params=params)

        return await self._execute_with_retry(path, make_request)

    async def _execute_with_retry(
        self,
        path: str,
        request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]],
    ) -> Any:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            path: API path, for logging
            request_fn: Async function that makes the HTTP request

        Returns:
            Parsed JSON response

        Raises:
            RepracError: On non-retryable errors or after max retries
        """
        last_error: RepracError | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            started = time.monotonic()
            try:
                response = await request_fn()
            except httpx.TimeoutException as e:
                last_error = TransportError("TIMEOUT", "request timed out")
                if attempt >= self.retry_config.max_retries:
                    raise last_error from e
                await asyncio.sleep(self._get_backoff_time(attempt, None))
                continue
            except httpx.RequestError as e:
                last_error = TransportError("CONNECTION_ERROR", str(e) or type(e).__name__)
                if attempt >= self.retry_config.max_retries:
                    raise last_error from e
                await asyncio.sleep(self._get_backoff_time(attempt, None))
                continue

            log_http_response(
                response.status_code, path, (time.monotonic() - started) * 1000
            )

            if response.status_code < 400:
                return self._decode(response)

            error = self._parse_error_response(response)
            if not self._should_retry(response.status_code, attempt):
                raise error

            last_error = error
            retry_after = response.headers.get("Retry-After")
            await asyncio.sleep(self._get_backoff_time(attempt, retry_after))

        if last_error:
            raise last_error

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details", 0)

    def _decode(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError("invalid JSON response") from e

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

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return min(float(retry_after), self.retry_config.max_backoff)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> HTTPStatusError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate HTTPStatusError subclass
        """
        status_code = response.status_code
        message = f"HTTP {status_code}"

        if status_code == 404:
            return NotFoundError()

        if status_code in (403, 429) and (
            response.headers.get("X-RateLimit-Remaining") == "0"
            or "Retry-After" in response.headers
        ):
            retry_after_str = response.headers.get("Retry-After", "60")
            try:
                retry_after = int(retry_after_str)
            except ValueError:
                retry_after = 60
            return RateLimitedError(
                "RATE_LIMITED", f"{message} rate limited", status_code, retry_after
            )
        elif status_code in (401, 403):
            return AuthenticationError("UNAUTHORIZED", message, status_code)
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, status_code)
        else:
            return HTTPStatusError("HTTP_ERROR", message, status_code)
