"""Resilient HTTP transport - retry, rate limiting, circuit breaker, request tracking."""

from glossia.services.http.circuit_breaker import OPEN_CIRCUIT_MESSAGE, CircuitBreaker, CircuitState
from glossia.services.http.http_client import DEFAULT_TIMEOUT_SECONDS, ResilientHttpClient
from glossia.services.http.rate_limiter import RateLimiter
from glossia.services.http.request_tracker import RequestInfo, RequestStats, RequestTracker, hash_request_body
from glossia.services.http.response_handler import error_from_response, handle_response, parse_retry_after
from glossia.services.http.retry_service import RetryConfig, RetryService

__all__ = [
    "CircuitBreaker",
    "CircuitState",
    "OPEN_CIRCUIT_MESSAGE",
    "ResilientHttpClient",
    "DEFAULT_TIMEOUT_SECONDS",
    "RateLimiter",
    "RequestInfo",
    "RequestStats",
    "RequestTracker",
    "hash_request_body",
    "error_from_response",
    "handle_response",
    "parse_retry_after",
    "RetryConfig",
    "RetryService",
]
