"""Mock Image Client - deterministic image provider for tests and offline runs."""

import asyncio
from typing import Dict, List, Optional

from glossia.core import ApiError, ImageResult
from glossia.services.images.image_client import ImageClient

DEFAULT_MOCK_COUNT = 5


class MockImageClient(ImageClient):
    """In-memory image provider with configurable failure and delay."""

    def __init__(
        self,
        should_fail: bool = False,
        delay: float = 0.0,
        custom_results: Optional[Dict[str, List[ImageResult]]] = None,
    ):
        self.should_fail = should_fail
        self.delay = delay
        self.custom_results: Dict[str, List[ImageResult]] = dict(custom_results or {})
        self.queries: List[str] = []

    def with_custom_results(self, query: str, results: List[ImageResult]) -> "MockImageClient":
        self.custom_results[query] = list(results)
        return self

    @staticmethod
    def generate_mock_results(query: str, count: int) -> List[ImageResult]:
        slug = query.replace(" ", "_")
        return [
            ImageResult(
                url=f"https://example.com/{slug}_image_{i}.jpg",
                thumbnail_url=f"https://example.com/{slug}_thumb_{i}.jpg",
                title=f"Mock image {i + 1} for {query}",
                width=800,
                height=600,
            )
            for i in range(count)
        ]

    async def search_images(self, query: str, count: Optional[int] = None) -> List[ImageResult]:
        self.queries.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.should_fail:
            raise ApiError("Mock image client configured to fail")

        if query in self.custom_results:
            return list(self.custom_results[query])
        return self.generate_mock_results(query, count if count is not None else DEFAULT_MOCK_COUNT)

    def provider_name(self) -> str:
        return "Mock"

    async def health_check(self) -> None:
        if self.should_fail:
            raise ApiError("Mock image client health check failed")
