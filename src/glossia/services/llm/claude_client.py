"""Claude Client - Anthropic messages provider."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from glossia.core import ApiError
from glossia.services.http import ResilientHttpClient, RetryConfig
from glossia.services.llm.llm_client import PromptedLLMClient
from glossia.services.llm.llm_config import LLMConfig
from glossia.services.llm.prompts import HEALTH_CHECK_PROMPT

logger = logging.getLogger(__name__)


class ClaudeClient(PromptedLLMClient):
    """LLM provider speaking the Anthropic messages protocol."""

    DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
    DEFAULT_MODEL = "claude-3-haiku-20240307"
    DEFAULT_MAX_TOKENS = 1024
    ANTHROPIC_VERSION = "2023-06-01"

    def __init__(self, config: LLMConfig, http_client: Optional[ResilientHttpClient] = None):
        config.validate()
        self.config = config
        headers = {
            "x-api-key": config.api_key or "",
            "anthropic-version": self.ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }
        if http_client is None:
            http_client = ResilientHttpClient(
                timeout=config.timeout,
                retry_config=RetryConfig(max_retries=config.max_retries),
            )
        self._http = http_client.with_headers(headers)
        logger.info(f"Claude client created for model {self.model}")

    @property
    def base_url(self) -> str:
        return (self.config.base_url or self.DEFAULT_BASE_URL).rstrip("/")

    @property
    def model(self) -> str:
        return self.config.model or self.DEFAULT_MODEL

    def provider_name(self) -> str:
        return "Claude"

    async def _complete(
        self,
        prompt: str,
        json_mode: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        body: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens or self.config.max_tokens or self.DEFAULT_MAX_TOKENS,
            "messages": [{"role": "user", "content": prompt}],
        }
        effective_temperature = temperature if temperature is not None else self.config.temperature
        if effective_temperature is not None:
            body["temperature"] = effective_temperature

        response = await self._http.post_json(f"{self.base_url}/messages", body)

        try:
            content = response["content"][0]["text"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str):
            raise ApiError("Invalid response format from Claude")
        return content

    async def health_check(self) -> None:
        # No lightweight status endpoint; a minimal completion proves the key works.
        logger.info("Performing Claude health check")
        await self._complete(HEALTH_CHECK_PROMPT)

    async def aclose(self) -> None:
        await self._http.aclose()
