"""Base async HTTP client for the time-series store.

Provides what every store query needs:
- A pooled httpx.AsyncClient opened with ``async with``
- A token bucket so a long lookback does not flood the store
- Retries with exponential backoff while the store is restarting or behind
  an unavailable proxy (502/503/504, timeouts, connection failures)
- StoreQueryError carrying the store's own error message

Usage:
    class PingClient(BaseAsyncClient):
        async def ping(self) -> dict:
            return await self.get("/ping")
"""

import asyncio
import logging
from typing import Any

import httpx


logger = logging.getLogger(__name__)

# Store unavailable; the same query succeeds once it is back
_UNAVAILABLE_STATUS_CODES = frozenset({502, 503, 504})
_MAX_RETRIES = 3
_BASE_BACKOFF = 1.0  # seconds


class RateLimiter:
    """Token bucket rate limiter for async operations.

    Args:
        rate: Maximum requests per second
    """

    def __init__(self, rate: int) -> None:
        self.rate = rate
        self.tokens = rate
        self.updated_at: float = 0.0
        self._initialized: bool = False
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Acquire a token, waiting if necessary."""
        async with self._lock:
            loop = asyncio.get_running_loop()

            if not self._initialized:
                self.updated_at = loop.time()
                self._initialized = True

            while self.tokens < 1:
                now = loop.time()
                self.tokens = min(self.rate, self.tokens + (now - self.updated_at) * self.rate)
                self.updated_at = now
                if self.tokens < 1:
                    await asyncio.sleep((1 - self.tokens) / self.rate)

            self.tokens -= 1
            self.updated_at = loop.time()


class StoreQueryError(Exception):
    """Base exception for time-series store failures."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


def _error_message(response: httpx.Response) -> str:
    """Prefer the ``{"error": ...}`` message InfluxDB puts in error bodies."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return f"Store request failed ({response.status_code}): {body['error']}"
    return f"Store request failed: {response.status_code}"


class BaseAsyncClient:
    """Pooled, rate-limited HTTP client for one store endpoint.

    Args:
        base_url: Store base URL
        rate_limit: Maximum requests per second (default: 10)
        timeout: Request timeout in seconds (default: 30)
    """

    def __init__(self, base_url: str, rate_limit: int = 10, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._rate_limiter = RateLimiter(rate=rate_limit)
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BaseAsyncClient":
        # One connection per signal kind queried concurrently
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            limits=httpx.Limits(max_keepalive_connections=4, max_connections=4),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _backoff(self, attempt: int) -> float:
        return _BASE_BACKOFF * (2 ** attempt)

    async def _send(self, method: str, endpoint: str, params: dict[str, Any] | None) -> httpx.Response:
        """Send one request, retrying while the store is unavailable.

        Raises:
            StoreQueryError: If the store is still unavailable after all retries
        """
        for attempt in range(_MAX_RETRIES + 1):
            await self._rate_limiter.acquire()
            final = attempt == _MAX_RETRIES
            try:
                response = await self._client.request(method=method, url=endpoint, params=params)
            except (httpx.TimeoutException, httpx.NetworkError) as e:
                failure = "Request timeout" if isinstance(e, httpx.TimeoutException) else "Network error"
                if final:
                    logger.error("%s for %s: %s", failure, endpoint, e)
                    raise StoreQueryError(f"{failure}: {e}")
                reason = failure.lower()
            else:
                if response.status_code not in _UNAVAILABLE_STATUS_CODES or final:
                    return response
                reason = f"status {response.status_code}"

            backoff = self._backoff(attempt)
            logger.warning(
                "Store unavailable (%s) for %s, retrying in %.1fs (attempt %d/%d)",
                reason, endpoint, backoff, attempt + 1, _MAX_RETRIES + 1,
            )
            await asyncio.sleep(backoff)

        raise StoreQueryError("Request failed after retries")

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make a request and decode its JSON body.

        Args:
            method: HTTP method
            endpoint: Endpoint path (relative to base_url)
            params: Query parameters

        Returns:
            Parsed JSON response as dictionary

        Raises:
            StoreQueryError: On HTTP errors, invalid JSON or exhausted retries
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with context manager.")
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"

        logger.debug("%s %s%s", method, self.base_url, endpoint)
        response = await self._send(method, endpoint, params)

        if response.status_code >= 400:
            body = response.text[:500]
            logger.error("Store error: %d %s - %s", response.status_code, endpoint, body)
            raise StoreQueryError(_error_message(response), response.status_code, body)

        try:
            return response.json()
        except ValueError as e:
            raise StoreQueryError(
                f"Invalid JSON response: {e}", response.status_code, response.text[:500]
            )

    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Convenience method for GET requests."""
        return await self._request("GET", endpoint, params=params)
