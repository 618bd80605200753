"""Image Config - provider selection and result-count policy for image search."""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from glossia.core import ConfigError
from glossia.services.env_parsing import env_float, env_int, env_str


class ImageProvider(Enum):
    BRAVE = "brave"
    MOCK = "mock"

    @classmethod
    def parse(cls, value: str) -> "ImageProvider":
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            raise ConfigError(f"Unknown image provider: {value}") from e


@dataclass
class ImageConfig:
    """Settings for an image search client. Timeout is in seconds."""

    provider: ImageProvider = ImageProvider.BRAVE
    api_key: Optional[str] = None
    timeout: float = 10.0
    max_retries: int = 3
    default_count: int = 5
    max_count: int = 20

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ImageConfig":
        """
        Build a config from IMAGE_PROVIDER (default brave), BRAVE_API_KEY,
        IMAGE_TIMEOUT, IMAGE_MAX_RETRIES, IMAGE_DEFAULT_COUNT and
        IMAGE_MAX_COUNT.
        """
        provider = ImageProvider.parse(env_str("IMAGE_PROVIDER", environ) or "brave")
        api_key = env_str("BRAVE_API_KEY", environ) if provider is ImageProvider.BRAVE else None

        timeout = env_float("IMAGE_TIMEOUT", environ)
        max_retries = env_int("IMAGE_MAX_RETRIES", environ)
        default_count = env_int("IMAGE_DEFAULT_COUNT", environ)
        max_count = env_int("IMAGE_MAX_COUNT", environ)

        return cls(
            provider=provider,
            api_key=api_key,
            timeout=timeout if timeout is not None else 10.0,
            max_retries=max_retries if max_retries is not None else 3,
            default_count=default_count if default_count is not None else 5,
            max_count=max_count if max_count is not None else 20,
        )

    @classmethod
    def mock(cls) -> "ImageConfig":
        return cls(provider=ImageProvider.MOCK)

    def validate(self) -> None:
        if self.provider is ImageProvider.BRAVE and not (self.api_key and self.api_key.strip()):
            raise ConfigError("API key is required for Brave provider")
        if self.default_count <= 0:
            raise ConfigError("Default count must be greater than 0")
        if self.max_count <= 0:
            raise ConfigError("Max count must be greater than 0")
        if self.default_count > self.max_count:
            raise ConfigError("Default count cannot be greater than max count")

    def clamp_count(self, requested: Optional[int]) -> int:
        """Return `requested` clamped to [1, max_count], or the default."""
        if requested is None:
            return self.default_count
        return min(self.max_count, max(1, requested))
