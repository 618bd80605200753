"""Resilient HTTP Client - composes tracking, rate limiting, breaker and retry."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Dict, Optional

import httpx

from glossia.core import GlossiaError, NetworkError, ParseError
from glossia.core.errors import provider_details
from glossia.services.http.circuit_breaker import CircuitBreaker
from glossia.services.http.rate_limiter import RateLimiter
from glossia.services.http.request_tracker import RequestTracker, hash_request_body
from glossia.services.http.response_handler import handle_response
from glossia.services.http.retry_service import RetryConfig, RetryService, Sleeper

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class ResilientHttpClient:
    """
    Single entry point for provider HTTP traffic.

    Per method the concerns run in this order:
    - GET: request tracker -> rate limiter -> retry
    - POST: request tracker -> rate limiter -> circuit breaker -> retry
    - PUT/DELETE: rate limiter -> retry

    The rate limiter, breaker, tracker and connection pool are shared by
    copies made with with_headers / with_timeout, so one provider's traffic
    is shaped as a whole and closing any copy closes the pool. Headers and
    timeout travel with each request.
    """

    def __init__(
        self,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        retry_config: Optional[RetryConfig] = None,
        rate_limiter: Optional[RateLimiter] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        request_tracker: Optional[RequestTracker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Sleeper] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.headers: Dict[str, str] = dict(headers or {})
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self.rate_limiter = rate_limiter or RateLimiter()
        self.circuit_breaker = circuit_breaker or CircuitBreaker()
        self.request_tracker = request_tracker or RequestTracker()
        self._sleep = sleep
        self._retry = RetryService(self.retry_config, sleep=sleep)
        self._client = client or httpx.AsyncClient(timeout=timeout, transport=transport)

    def with_headers(self, headers: Dict[str, str]) -> "ResilientHttpClient":
        """Return a copy that sends the given headers on every request."""
        merged = dict(self.headers)
        merged.update(headers)
        return self._copy(headers=merged, timeout=self.timeout)

    def with_timeout(self, timeout: float) -> "ResilientHttpClient":
        """Return a copy with a different per-request timeout (seconds)."""
        return self._copy(headers=self.headers, timeout=timeout)

    def _copy(self, headers: Dict[str, str], timeout: float) -> "ResilientHttpClient":
        return ResilientHttpClient(
            headers=headers,
            timeout=timeout,
            retry_config=self.retry_config,
            rate_limiter=self.rate_limiter,
            circuit_breaker=self.circuit_breaker,
            request_tracker=self.request_tracker,
            sleep=self._sleep,
            client=self._client,
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ResilientHttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def get(self, url: str, json_body: Any = None) -> Any:
        return await self.request("GET", url, json_body)

    async def post(self, url: str, json_body: Any = None) -> Any:
        return await self.request("POST", url, json_body)

    async def put(self, url: str, json_body: Any = None) -> Any:
        return await self.request("PUT", url, json_body)

    async def delete(self, url: str, json_body: Any = None) -> Any:
        return await self.request("DELETE", url, json_body)

    async def get_json(self, url: str) -> Dict[str, Any]:
        """GET and require a JSON object body."""
        return self._require_object(await self.get(url), url)

    async def post_json(self, url: str, json_body: Any) -> Dict[str, Any]:
        """POST a JSON body and require a JSON object in response."""
        return self._require_object(await self.post(url, json_body), url)

    @staticmethod
    def _require_object(data: Any, url: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise ParseError(f"Expected JSON object from {url}")
        return data

    async def request(self, method: str, url: str, json_body: Any = None) -> Any:
        """
        Execute a request through the resilience pipeline for its method.

        Args:
            method: GET, POST, PUT or DELETE.
            url: Absolute URL.
            json_body: Optional JSON-serializable body.

        Returns:
            Parsed JSON body (None for an empty 2xx body).

        Raises:
            GlossiaError: Typed failure after retries are exhausted, or
                ApiError when the circuit breaker rejects the call.
        """
        method = method.upper()

        if method in ("GET", "POST"):
            body_hash = hash_request_body(json_body) if json_body is not None else None
            self.request_tracker.track_request(method, url, body_hash)

        await self.rate_limiter.wait_for_permit()

        async def attempt() -> Any:
            return await self._send(method, url, json_body)

        async def with_retry() -> Any:
            return await self._retry.execute(attempt)

        if method == "POST":
            return await self.circuit_breaker.call(with_retry)
        return await with_retry()

    async def _send(self, method: str, url: str, json_body: Any) -> Any:
        correlation_id = str(uuid.uuid4())
        started = time.monotonic()
        fields: Dict[str, Any] = {"correlation_id": correlation_id, "method": method, "url": url}

        try:
            response = await self._client.request(
                method, url, json=json_body, headers=self.headers, timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            error: GlossiaError = NetworkError(f"Request timed out: {e}")
            self._log_failure(fields, started, error, status=None)
            raise error from e
        except httpx.TransportError as e:
            error = NetworkError(str(e) or type(e).__name__)
            self._log_failure(fields, started, error, status=None)
            raise error from e

        try:
            data = handle_response(response)
        except GlossiaError as e:
            self._log_failure(fields, started, e, status=response.status_code)
            raise

        fields.update(status=response.status_code, elapsed_ms=_elapsed_ms(started))
        logger.debug(f"{method} {url} -> {response.status_code}", extra=fields)
        return data

    @staticmethod
    def _log_failure(fields: Dict[str, Any], started: float, error: GlossiaError, status: Optional[int]) -> None:
        fields = dict(fields)
        fields.update(status=status, elapsed_ms=_elapsed_ms(started), error_kind=error.kind)
        fields.update(provider_details(error))
        logger.warning(f"{fields['method']} {fields['url']} failed: {error}", extra=fields)


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
