"""Image Client Factory - builds image providers from configuration."""

import logging
import os
from typing import List, Mapping, Optional

from glossia.core import ConfigError
from glossia.services.http import ResilientHttpClient
from glossia.services.images.brave_image_client import BraveImageClient
from glossia.services.images.image_client import ImageClient
from glossia.services.images.image_config import ImageConfig, ImageProvider
from glossia.services.images.mock_image_client import MockImageClient

logger = logging.getLogger(__name__)


class ImageClientFactory:
    """Creates image clients so callers never name a concrete provider."""

    @staticmethod
    def create(config: ImageConfig, http_client: Optional[ResilientHttpClient] = None) -> ImageClient:
        config.validate()
        logger.info(f"Creating image client for provider: {config.provider.value}")

        if config.provider is ImageProvider.BRAVE:
            return BraveImageClient(config, http_client=http_client)
        if config.provider is ImageProvider.MOCK:
            return MockImageClient()
        raise ConfigError(f"Unsupported image provider: {config.provider}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ImageClient:
        return cls.create(ImageConfig.from_env(environ))

    @staticmethod
    def create_mock(should_fail: bool = False, delay: float = 0.0) -> MockImageClient:
        return MockImageClient(should_fail=should_fail, delay=delay)

    @staticmethod
    def available_providers() -> List[str]:
        return [provider.value for provider in ImageProvider]

    @staticmethod
    def check_provider_availability(
        provider: ImageProvider,
        environ: Optional[Mapping[str, str]] = None,
    ) -> bool:
        """True if the environment holds a valid configuration for `provider`."""
        env = dict(os.environ if environ is None else environ)
        env["IMAGE_PROVIDER"] = provider.value
        try:
            ImageConfig.from_env(env).validate()
        except ConfigError as e:
            logger.debug(f"Image provider {provider.value} unavailable: {e}")
            return False
        return True
