"""Error taxonomy - closed set of failure kinds raised across Glossia."""

from typing import Dict, Optional


class GlossiaError(Exception):
    """
    Base class for every failure surfaced by the reading backend.

    Subclasses carry just enough context for upstream decisions: whether
    a call may be retried, whether it should count against the circuit
    breaker, and which user-facing message to show.
    """

    kind = "error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    @property
    def is_retryable(self) -> bool:
        """True if the transport may attempt the call again."""
        return False

    @property
    def triggers_circuit_breaker(self) -> bool:
        """True if this failure counts as an authentication failure."""
        return False

    def __str__(self) -> str:
        return self.message


class NetworkError(GlossiaError):
    """Transport-level I/O, connection or timeout failure."""

    kind = "network"

    @property
    def is_retryable(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"Network error: {self.message}"


class HttpError(GlossiaError):
    """Non-2xx response with the status preserved."""

    kind = "http"

    def __init__(
        self,
        status: int,
        message: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.headers = headers
        self.body = body

    @property
    def is_retryable(self) -> bool:
        return self.status >= 500 or self.status == 429

    @property
    def triggers_circuit_breaker(self) -> bool:
        return self.status in (401, 403)

    def __str__(self) -> str:
        return f"HTTP {self.status}: {self.message}"


class AuthenticationError(GlossiaError):
    """401/403 specialization carrying provider details when available."""

    kind = "authentication"

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        provider_type: Optional[str] = None,
        provider_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.provider_type = provider_type
        self.provider_code = provider_code

    @property
    def triggers_circuit_breaker(self) -> bool:
        return self.status in (401, 403)

    def __str__(self) -> str:
        return f"Authentication failed: {self.message}"


class BadRequestError(GlossiaError):
    """400 specialization carrying provider details when available."""

    kind = "bad_request"

    def __init__(
        self,
        message: str,
        provider_type: Optional[str] = None,
        provider_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.provider_type = provider_type
        self.provider_code = provider_code

    def __str__(self) -> str:
        return f"Bad request: {self.message}"


class RateLimitError(GlossiaError):
    """429 specialization carrying Retry-After seconds when present."""

    kind = "rate_limit"

    def __init__(self, message: str, retry_after_secs: Optional[int] = None):
        super().__init__(message)
        self.retry_after_secs = retry_after_secs

    @property
    def is_retryable(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"Rate limit exceeded: {self.message}"


class ApiError(GlossiaError):
    """Provider-level semantic failure (empty completion, open breaker, ...)."""

    kind = "api"

    def __str__(self) -> str:
        return f"API error: {self.message}"


class ParseError(GlossiaError):
    """Malformed JSON or schema mismatch."""

    kind = "parse"

    def __str__(self) -> str:
        return f"Parse error: {self.message}"


class ConfigError(GlossiaError):
    """Missing or invalid settings, including unreadable vocabulary files."""

    kind = "config"

    def __str__(self) -> str:
        return f"Configuration error: {self.message}"


class InvalidResponseContentError(GlossiaError):
    kind = "invalid_response_content"

    def __init__(self, message: str = "Invalid response content"):
        super().__init__(message)


class EmptyBookError(GlossiaError):
    kind = "empty_book"

    def __init__(self, message: str = "Book content is empty"):
        super().__init__(message)


def provider_details(error: GlossiaError) -> Dict[str, Optional[str]]:
    """Return provider type/code for log fields, when the error carries them."""
    return {
        "provider_type": getattr(error, "provider_type", None),
        "provider_code": getattr(error, "provider_code", None),
    }


def describe_error(error: Exception) -> str:
    """
    Map an error to the message shown to the reader.

    Args:
        error: Any exception raised by the engine.

    Returns:
        Short, user-facing description.
    """
    if isinstance(error, HttpError):
        if error.status in (401, 403):
            return "Authentication failed. Please check your API key."
        if error.status == 404:
            return "The service is temporarily unavailable. Please try again later."
        if error.status == 429:
            return "Too many requests. Please slow down and try again."
        if error.status >= 500:
            return "The service is having problems. Please try again later."
        return f"Request failed with status {error.status}."
    if isinstance(error, AuthenticationError):
        return "Authentication failed. Please check your API key."
    if isinstance(error, RateLimitError):
        if error.retry_after_secs:
            return f"Too many requests. Please wait {error.retry_after_secs} seconds."
        return "Too many requests. Please slow down and try again."
    if isinstance(error, BadRequestError):
        return "The request was rejected by the provider."
    if isinstance(error, NetworkError):
        return "Connection issue. Please check your internet connection."
    if isinstance(error, ParseError):
        return "Received an unexpected response from the service."
    if isinstance(error, ConfigError):
        return "Configuration problem. Please check your settings."
    if isinstance(error, EmptyBookError):
        return "There is no text to read."
    if isinstance(error, InvalidResponseContentError):
        return "The service returned content that could not be used."
    if isinstance(error, ApiError):
        return f"The service reported a problem: {error.message}"
    return f"Unexpected error: {error}"
