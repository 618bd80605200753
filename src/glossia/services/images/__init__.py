"""Image services - search interface, Brave and mock providers, and factory."""

from glossia.services.images.brave_image_client import BraveImageClient, parse_brave_response
from glossia.services.images.image_client import ImageClient, is_too_small
from glossia.services.images.image_config import ImageConfig, ImageProvider
from glossia.services.images.image_factory import ImageClientFactory
from glossia.services.images.mock_image_client import MockImageClient

__all__ = [
    "ImageClient",
    "ImageConfig",
    "ImageProvider",
    "ImageClientFactory",
    "BraveImageClient",
    "MockImageClient",
    "parse_brave_response",
    "is_too_small",
]
