"""Mock LLM Client - deterministic provider for tests and offline runs."""

import asyncio
from typing import Dict, List, Optional, Tuple, Union

from glossia.core import (
    GlossiaError,
    ImageQueryOptimizationRequest,
    SimplificationResponse,
)
from glossia.services.llm.llm_client import LLMClient

MockResponse = Union[SimplificationResponse, str, GlossiaError]


class MockLLMClient(LLMClient):
    """
    In-memory LLM provider.

    By default it echoes predictable text. `custom_responses` maps a
    sentence or word to a canned reply (or an error to raise for that
    key); `should_fail` makes every call raise; `delay` adds an await
    before replying. Every call is recorded in `calls`.
    """

    def __init__(
        self,
        custom_responses: Optional[Dict[str, MockResponse]] = None,
        should_fail: Optional[GlossiaError] = None,
        delay: float = 0.0,
    ):
        self.custom_responses: Dict[str, MockResponse] = dict(custom_responses or {})
        self.should_fail = should_fail
        self.delay = delay
        self.calls: List[Tuple[str, str]] = []

    def add_response(self, key: str, response: MockResponse) -> None:
        self.custom_responses[key] = response

    def call_count(self, operation: Optional[str] = None) -> int:
        if operation is None:
            return len(self.calls)
        return sum(1 for op, _ in self.calls if op == operation)

    async def _before_reply(self, operation: str, key: str) -> Optional[MockResponse]:
        self.calls.append((operation, key))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.should_fail is not None:
            raise self.should_fail
        custom = self.custom_responses.get(key)
        if isinstance(custom, GlossiaError):
            raise custom
        return custom

    async def simplify(self, sentence: str) -> SimplificationResponse:
        custom = await self._before_reply("simplify", sentence)
        if isinstance(custom, SimplificationResponse):
            return custom
        if isinstance(custom, str):
            return SimplificationResponse(original=sentence, simplified=custom, words=[])
        return SimplificationResponse(original=sentence, simplified=f"Simplified: {sentence}", words=[])

    async def define(self, word: str, context: str) -> str:
        custom = await self._before_reply("define", word)
        if isinstance(custom, str):
            return custom
        return f"Mock meaning for '{word}'"

    async def optimize_image_query(self, request: ImageQueryOptimizationRequest) -> str:
        custom = await self._before_reply("optimize_image_query", request.word)
        if isinstance(custom, str):
            return custom
        return f"optimized {request.word}"

    def provider_name(self) -> str:
        return "Mock"

    async def health_check(self) -> None:
        self.calls.append(("health_check", ""))
        if self.should_fail is not None:
            raise self.should_fail

    async def aclose(self) -> None:
        return None
