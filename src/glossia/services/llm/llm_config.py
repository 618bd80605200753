"""LLM Config - provider selection and validation for language-model clients."""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from glossia.core import ConfigError
from glossia.services.env_parsing import env_float, env_int, env_str


class ProviderType(Enum):
    OPENAI = "openai"
    CLAUDE = "claude"
    GEMINI = "gemini"
    MOCK = "mock"

    @classmethod
    def parse(cls, value: str) -> "ProviderType":
        """Parse a provider name case-insensitively."""
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            raise ConfigError(f"Unknown LLM provider: {value}") from e


_API_KEY_ENV = {
    ProviderType.OPENAI: "OPENAI_API_KEY",
    ProviderType.CLAUDE: "CLAUDE_API_KEY",
    ProviderType.GEMINI: "GEMINI_API_KEY",
}
_BASE_URL_ENV = {
    ProviderType.OPENAI: "OPENAI_BASE_URL",
    ProviderType.CLAUDE: "CLAUDE_BASE_URL",
}
_MODEL_ENV = {
    ProviderType.OPENAI: "OPENAI_MODEL",
    ProviderType.CLAUDE: "CLAUDE_MODEL",
    ProviderType.GEMINI: "GEMINI_MODEL",
}


@dataclass
class LLMConfig:
    """Settings for one LLM provider client. Timeout is in seconds."""

    provider: ProviderType = ProviderType.OPENAI
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: Optional[str] = None
    timeout: float = 30.0
    max_retries: int = 3
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LLMConfig":
        """
        Build a config from environment variables.

        Reads LLM_PROVIDER (default openai), the provider's API key, base
        URL and model, plus LLM_TIMEOUT, LLM_MAX_RETRIES, LLM_TEMPERATURE
        and LLM_MAX_TOKENS.

        Raises:
            ConfigError: On an unknown provider, a missing API key, or a
                value that does not parse.
        """
        provider = ProviderType.parse(env_str("LLM_PROVIDER", environ) or "openai")

        api_key = None
        key_env = _API_KEY_ENV.get(provider)
        if key_env is not None:
            api_key = env_str(key_env, environ)
            if api_key is None:
                raise ConfigError(
                    f"{key_env} environment variable must be set. "
                    "Please check your .env file or environment variables."
                )

        base_url = env_str(_BASE_URL_ENV[provider], environ) if provider in _BASE_URL_ENV else None
        model = env_str(_MODEL_ENV[provider], environ) if provider in _MODEL_ENV else None

        timeout = env_float("LLM_TIMEOUT", environ)
        max_retries = env_int("LLM_MAX_RETRIES", environ)

        return cls(
            provider=provider,
            api_key=api_key,
            base_url=base_url,
            model=model,
            timeout=timeout if timeout is not None else 30.0,
            max_retries=max_retries if max_retries is not None else 3,
            temperature=env_float("LLM_TEMPERATURE", environ),
            max_tokens=env_int("LLM_MAX_TOKENS", environ),
        )

    @classmethod
    def for_openai(cls, api_key: str, model: Optional[str] = None) -> "LLMConfig":
        return cls(provider=ProviderType.OPENAI, api_key=api_key, model=model)

    @classmethod
    def for_claude(cls, api_key: str, model: Optional[str] = None) -> "LLMConfig":
        return cls(provider=ProviderType.CLAUDE, api_key=api_key, model=model)

    @classmethod
    def for_gemini(cls, api_key: str, model: Optional[str] = None) -> "LLMConfig":
        return cls(provider=ProviderType.GEMINI, api_key=api_key, model=model)

    @classmethod
    def mock(cls) -> "LLMConfig":
        return cls(provider=ProviderType.MOCK)

    def validate(self) -> None:
        """
        Check provider requirements and numeric ranges.

        Raises:
            ConfigError: Describing the first problem found.
        """
        if self.provider is ProviderType.OPENAI:
            if self.api_key is None:
                raise ConfigError(
                    "OpenAI API key is required. Please set OPENAI_API_KEY in your .env file or environment."
                )
            if not self.api_key.strip():
                raise ConfigError("OpenAI API key cannot be empty. Please check OPENAI_API_KEY.")
            if not self.api_key.startswith("sk-"):
                raise ConfigError("Invalid OpenAI API key format. OpenAI keys should start with 'sk-'.")
        elif self.provider in (ProviderType.CLAUDE, ProviderType.GEMINI):
            name = "Claude" if self.provider is ProviderType.CLAUDE else "Gemini"
            env_name = _API_KEY_ENV[self.provider]
            if self.api_key is None:
                raise ConfigError(f"{name} API key is required. Please set {env_name} in your .env file or environment.")
            if not self.api_key.strip():
                raise ConfigError(f"{name} API key cannot be empty. Please check {env_name}.")

        if self.temperature is not None and not 0.0 <= self.temperature <= 2.0:
            raise ConfigError("Temperature must be between 0.0 and 2.0")
        if self.max_tokens is not None and self.max_tokens <= 0:
            raise ConfigError("Max tokens must be greater than 0")
        if self.timeout <= 0:
            raise ConfigError("Timeout must be greater than 0")
