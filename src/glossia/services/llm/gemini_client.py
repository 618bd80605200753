"""Gemini Client - Google Gemini provider via the google-genai SDK."""

from __future__ import annotations

import logging
from typing import Any, Optional

import google.genai as genai
import httpx
from google.genai import errors as genai_errors
from google.genai import types

from glossia.core import (
    ApiError,
    AuthenticationError,
    BadRequestError,
    GlossiaError,
    HttpError,
    NetworkError,
    RateLimitError,
)
from glossia.services.http import CircuitBreaker, RateLimiter, RetryConfig, RetryService
from glossia.services.llm.llm_client import PromptedLLMClient
from glossia.services.llm.llm_config import LLMConfig
from glossia.services.llm.prompts import HEALTH_CHECK_PROMPT

logger = logging.getLogger(__name__)


def map_genai_error(error: genai_errors.APIError) -> GlossiaError:
    """Translate an SDK error into the Glossia taxonomy by status code."""
    code = getattr(error, "code", None) or 0
    message = getattr(error, "message", None) or str(error)
    provider_type = getattr(error, "status", None)

    if code in (401, 403):
        return AuthenticationError(message, status=code, provider_type=provider_type, provider_code=str(code))
    if code == 400:
        return BadRequestError(message, provider_type=provider_type, provider_code=str(code))
    if code == 429:
        return RateLimitError(message)
    return HttpError(code, message)


class GeminiClient(PromptedLLMClient):
    """
    LLM provider backed by Google Gemini.

    The SDK owns the HTTP connection, so the resilience pieces (rate
    limiter, circuit breaker, retry) are applied around each SDK call
    instead of through ResilientHttpClient.
    """

    DEFAULT_MODEL = "gemini-2.0-flash"

    def __init__(
        self,
        config: LLMConfig,
        genai_client: Optional[Any] = None,
        rate_limiter: Optional[RateLimiter] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        retry_service: Optional[RetryService] = None,
    ):
        config.validate()
        self.config = config
        if genai_client is None:
            genai_client = genai.Client(
                api_key=config.api_key,
                http_options=types.HttpOptions(timeout=int(config.timeout * 1000)),
            )
        self._client = genai_client
        self.rate_limiter = rate_limiter or RateLimiter()
        self.circuit_breaker = circuit_breaker or CircuitBreaker()
        self._retry = retry_service or RetryService(RetryConfig(max_retries=config.max_retries))
        logger.info(f"Gemini client created for model {self.model}")

    @property
    def model(self) -> str:
        return self.config.model or self.DEFAULT_MODEL

    def provider_name(self) -> str:
        return "Gemini"

    async def _complete(
        self,
        prompt: str,
        json_mode: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        generation_config = types.GenerateContentConfig(
            temperature=temperature if temperature is not None else self.config.temperature,
            max_output_tokens=max_tokens or self.config.max_tokens,
            response_mime_type="application/json" if json_mode else None,
        )

        async def attempt() -> str:
            try:
                response = await self._client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=generation_config,
                )
            except genai_errors.APIError as e:
                raise map_genai_error(e) from e
            except httpx.TimeoutException as e:
                raise NetworkError(f"Request timed out: {e}") from e
            except httpx.TransportError as e:
                raise NetworkError(str(e) or type(e).__name__) from e

            if not response.text:
                raise ApiError("Empty response from Gemini")
            return response.text

        async def with_retry() -> str:
            return await self._retry.execute(attempt)

        await self.rate_limiter.wait_for_permit()
        return await self.circuit_breaker.call(with_retry)

    async def health_check(self) -> None:
        logger.info("Performing Gemini health check")
        await self._complete(HEALTH_CHECK_PROMPT)
