"""Brave Image Client - Brave Search image API provider."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from glossia.core import ApiError, ImageResult
from glossia.services.http import ResilientHttpClient, RetryConfig
from glossia.services.images.image_client import ImageClient, is_too_small
from glossia.services.images.image_config import ImageConfig

logger = logging.getLogger(__name__)


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def parse_brave_response(response: Dict[str, Any]) -> List[ImageResult]:
    """
    Convert a Brave response into image results.

    Entries without any URL are skipped, as are entries whose known
    dimensions fall below 275x275.

    Raises:
        ApiError: If the response has no `results` array.
    """
    results = response.get("results")
    if not isinstance(results, list):
        raise ApiError("Invalid response format from Brave Search")

    images: List[ImageResult] = []
    for item in results:
        if not isinstance(item, dict):
            continue
        properties = item.get("properties") if isinstance(item.get("properties"), dict) else {}
        thumbnail = item.get("thumbnail") if isinstance(item.get("thumbnail"), dict) else {}

        url = properties.get("url") or item.get("url") or item.get("src")
        if not isinstance(url, str) or not url:
            continue

        title = item.get("title")
        thumbnail_url = thumbnail.get("src")
        image = ImageResult(
            url=url,
            thumbnail_url=thumbnail_url if isinstance(thumbnail_url, str) and thumbnail_url else url,
            title=title if isinstance(title, str) and title else "Untitled",
            width=_as_int(properties.get("width")),
            height=_as_int(properties.get("height")),
        )
        if is_too_small(image):
            logger.debug(f"Skipping small image {image.width}x{image.height}: {url}")
            continue
        images.append(image)

    return images


class BraveImageClient(ImageClient):
    """Image provider backed by the Brave Search images endpoint."""

    SEARCH_URL = "https://api.search.brave.com/res/v1/images/search"

    def __init__(self, config: ImageConfig, http_client: Optional[ResilientHttpClient] = None):
        config.validate()
        self.config = config
        if http_client is None:
            http_client = ResilientHttpClient(
                timeout=config.timeout,
                retry_config=RetryConfig(max_retries=config.max_retries),
            )
        self._http = http_client.with_headers(
            {
                "X-Subscription-Token": config.api_key or "",
                "Accept": "application/json",
            }
        )

    def build_search_url(self, query: str, count: int) -> str:
        params = {"q": query, "count": self.config.clamp_count(count)}
        return str(httpx.URL(self.SEARCH_URL, params=params))

    def provider_name(self) -> str:
        return "Brave"

    async def search_images(self, query: str, count: Optional[int] = None) -> List[ImageResult]:
        logger.info(f"Searching images for query: '{query}'")
        if not query.strip():
            logger.warning("Empty search query provided")
            raise ApiError("Search query cannot be empty")

        url = self.build_search_url(query, self.config.clamp_count(count))
        response = await self._http.get_json(url)
        images = parse_brave_response(response)

        logger.info(f"Found {len(images)} images for query: '{query}'")
        return images

    async def health_check(self) -> None:
        results = await self.search_images("test", 1)
        if not results:
            raise ApiError("Brave Search API returned no results for test query")

    async def aclose(self) -> None:
        await self._http.aclose()
