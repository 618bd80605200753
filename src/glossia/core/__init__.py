"""Domain layer - Pure entities and the error taxonomy."""

from .errors import (
    ApiError,
    AuthenticationError,
    BadRequestError,
    ConfigError,
    EmptyBookError,
    GlossiaError,
    HttpError,
    InvalidResponseContentError,
    NetworkError,
    ParseError,
    RateLimitError,
    describe_error,
)
from .reading_entities import (
    ImageFetchState,
    ImageFetchStatus,
    ImageQueryOptimizationRequest,
    ImageResult,
    SimplificationResponse,
    WordMeaning,
)

__all__ = [
    "GlossiaError",
    "NetworkError",
    "HttpError",
    "AuthenticationError",
    "BadRequestError",
    "RateLimitError",
    "ApiError",
    "ParseError",
    "ConfigError",
    "InvalidResponseContentError",
    "EmptyBookError",
    "describe_error",
    "WordMeaning",
    "SimplificationResponse",
    "ImageResult",
    "ImageQueryOptimizationRequest",
    "ImageFetchState",
    "ImageFetchStatus",
]
