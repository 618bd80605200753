"""Image Client - interface for image search providers."""

from abc import ABC, abstractmethod
from typing import List, Optional

from glossia.core import ImageResult

MIN_IMAGE_WIDTH = 275
MIN_IMAGE_HEIGHT = 275


def is_too_small(image: ImageResult) -> bool:
    """True if known dimensions fall below the 275x275 floor."""
    if image.width is None or image.height is None:
        return False
    return image.width < MIN_IMAGE_WIDTH or image.height < MIN_IMAGE_HEIGHT


class ImageClient(ABC):
    """
    Abstract image search provider.

    Implementations (BraveImageClient, MockImageClient) are swapped at
    construction time without other code changes.
    """

    @abstractmethod
    async def search_images(self, query: str, count: Optional[int] = None) -> List[ImageResult]:
        """
        Search for images illustrating a query.

        Args:
            query: Search text, usually an optimized visual query.
            count: Desired number of results; clamped by the provider's
                configuration, defaulting to its default_count.

        Returns:
            Image results with URLs, thumbnails and titles.
        """
        pass

    @abstractmethod
    def provider_name(self) -> str:
        pass

    @abstractmethod
    async def health_check(self) -> None:
        pass

    async def aclose(self) -> None:
        return None
