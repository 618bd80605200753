"""LLM services - provider interface, concrete providers and factory."""

from glossia.services.llm.claude_client import ClaudeClient
from glossia.services.llm.gemini_client import GeminiClient
from glossia.services.llm.llm_client import (
    LLMClient,
    PromptedLLMClient,
    parse_optimized_query,
    parse_simplification_response,
)
from glossia.services.llm.llm_config import LLMConfig, ProviderType
from glossia.services.llm.llm_factory import LLMClientFactory
from glossia.services.llm.mock_llm_client import MockLLMClient
from glossia.services.llm.openai_client import OpenAIClient

__all__ = [
    "LLMClient",
    "PromptedLLMClient",
    "LLMConfig",
    "ProviderType",
    "LLMClientFactory",
    "OpenAIClient",
    "ClaudeClient",
    "GeminiClient",
    "MockLLMClient",
    "parse_simplification_response",
    "parse_optimized_query",
]
