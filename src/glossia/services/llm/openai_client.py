"""OpenAI Client - chat-completions provider."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from glossia.core import ApiError, AuthenticationError, BadRequestError, GlossiaError, HttpError
from glossia.services.http import ResilientHttpClient, RetryConfig
from glossia.services.llm.llm_client import PromptedLLMClient
from glossia.services.llm.llm_config import LLMConfig

logger = logging.getLogger(__name__)


class OpenAIClient(PromptedLLMClient):
    """
    LLM provider speaking the OpenAI chat-completions protocol.

    Any OpenAI-compatible endpoint works by setting `base_url`.
    """

    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    DEFAULT_MODEL = "gpt-4o-mini"

    def __init__(self, config: LLMConfig, http_client: Optional[ResilientHttpClient] = None):
        config.validate()
        self.config = config
        headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        }
        if http_client is None:
            http_client = ResilientHttpClient(
                timeout=config.timeout,
                retry_config=RetryConfig(max_retries=config.max_retries),
            )
        self._http = http_client.with_headers(headers)
        logger.info(f"OpenAI client created for model {self.model}")

    @property
    def base_url(self) -> str:
        return (self.config.base_url or self.DEFAULT_BASE_URL).rstrip("/")

    @property
    def model(self) -> str:
        return self.config.model or self.DEFAULT_MODEL

    def provider_name(self) -> str:
        return "OpenAI"

    async def _complete(
        self,
        prompt: str,
        json_mode: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        url = f"{self.base_url}/chat/completions"
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }

        if json_mode:
            body["response_format"] = {"type": "json_object"}
            body["temperature"] = 1
            if self.config.max_tokens is not None:
                body["max_completion_tokens"] = self.config.max_tokens
        else:
            if temperature is not None:
                body["temperature"] = temperature
            if max_tokens is not None:
                body["max_completion_tokens"] = max_tokens

        try:
            response = await self._http.post_json(url, body)
        except AuthenticationError as e:
            raise AuthenticationError(
                f"OpenAI authentication failed. Please check your API key and ensure it's valid. Model: {self.model}",
                status=e.status,
                provider_type=e.provider_type or "invalid_api_key",
                provider_code=e.provider_code,
            ) from e
        except BadRequestError as e:
            raise BadRequestError(
                f"OpenAI request invalid: {e.message}. Model: {self.model}, URL: {url}",
                provider_type=e.provider_type or "invalid_request",
                provider_code=e.provider_code,
            ) from e

        content = _extract_content(response)
        if content is None:
            logger.error("Invalid OpenAI response format: missing content field")
            raise ApiError("Invalid response format from OpenAI - missing content field")

        logger.debug(f"OpenAI completion successful, response length: {len(content)} chars")
        return content

    async def health_check(self) -> None:
        url = f"{self.base_url}/models"
        logger.info(f"Performing OpenAI health check at: {url}")

        try:
            response = await self._http.get_json(url)
        except AuthenticationError as e:
            raise AuthenticationError(
                "OpenAI health check failed: Invalid API key or insufficient permissions",
                status=e.status,
                provider_type="invalid_api_key",
            ) from e
        except HttpError as e:
            raise ApiError(
                f"OpenAI health check failed with HTTP {e.status}: {e.message}. "
                "Check your base URL and network connectivity."
            ) from e
        except GlossiaError as e:
            raise ApiError(f"OpenAI health check failed: {e}") from e

        models = response.get("data")
        if not isinstance(models, list):
            raise ApiError("OpenAI health check returned unexpected response format")
        if not models:
            raise ApiError("OpenAI health check returned empty model list")

        available = [m.get("id") for m in models if isinstance(m, dict)]
        if self.model not in available:
            logger.warning(
                f"Configured model '{self.model}' not found in available models. "
                "This may cause API requests to fail."
            )
        logger.info(f"OpenAI health check successful - {len(models)} models available")

    async def aclose(self) -> None:
        await self._http.aclose()


def _extract_content(response: Dict[str, Any]) -> Optional[str]:
    try:
        content = response["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None
