"""LLM Client Factory - builds providers from configuration."""

import logging
import os
from typing import List, Mapping, Optional

from glossia.core import ConfigError
from glossia.services.http import ResilientHttpClient
from glossia.services.llm.claude_client import ClaudeClient
from glossia.services.llm.gemini_client import GeminiClient
from glossia.services.llm.llm_client import LLMClient
from glossia.services.llm.llm_config import LLMConfig, ProviderType
from glossia.services.llm.mock_llm_client import MockLLMClient
from glossia.services.llm.openai_client import OpenAIClient

logger = logging.getLogger(__name__)


class LLMClientFactory:
    """Creates LLM clients so callers never name a concrete provider."""

    @staticmethod
    def create(config: LLMConfig, http_client: Optional[ResilientHttpClient] = None) -> LLMClient:
        """
        Create the client selected by `config.provider`.

        Args:
            config: Provider settings; validated before construction.
            http_client: Optional shared transport for HTTP providers.

        Raises:
            ConfigError: If the configuration is invalid.
        """
        config.validate()
        logger.info(f"Creating LLM client for provider: {config.provider.value}")

        if config.provider is ProviderType.OPENAI:
            return OpenAIClient(config, http_client=http_client)
        if config.provider is ProviderType.CLAUDE:
            return ClaudeClient(config, http_client=http_client)
        if config.provider is ProviderType.GEMINI:
            return GeminiClient(config)
        if config.provider is ProviderType.MOCK:
            return MockLLMClient()
        raise ConfigError(f"Unsupported LLM provider: {config.provider}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> LLMClient:
        return cls.create(LLMConfig.from_env(environ))

    @staticmethod
    def create_mock() -> MockLLMClient:
        return MockLLMClient()

    @staticmethod
    def available_providers() -> List[str]:
        return [provider.value for provider in ProviderType]

    @staticmethod
    def check_provider_availability(
        provider: ProviderType,
        environ: Optional[Mapping[str, str]] = None,
    ) -> bool:
        """True if the environment holds a valid configuration for `provider`."""
        env = dict(os.environ if environ is None else environ)
        env["LLM_PROVIDER"] = provider.value

        try:
            LLMConfig.from_env(env).validate()
        except ConfigError as e:
            logger.debug(f"Provider {provider.value} unavailable: {e}")
            return False
        return True
