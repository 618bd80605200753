"""LLM Client - interface for simplification, definitions and image queries."""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from glossia.core import (
    ImageQueryOptimizationRequest,
    ParseError,
    SimplificationResponse,
    WordMeaning,
)
from glossia.services.llm.prompts import (
    build_image_query_prompt,
    build_simplification_prompt,
    build_word_meaning_prompt,
)

logger = logging.getLogger(__name__)

DEFINE_TEMPERATURE = 1.0
DEFINE_MAX_TOKENS = 30

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class LLMClient(ABC):
    """
    Abstract language-model provider.

    Implementations (OpenAIClient, ClaudeClient, GeminiClient,
    MockLLMClient) are interchangeable at construction time.
    """

    @abstractmethod
    async def simplify(self, sentence: str) -> SimplificationResponse:
        """
        Rewrite a sentence in modern English and annotate difficult words.

        Args:
            sentence: Sentence exactly as produced by the parser.

        Returns:
            SimplificationResponse whose `original` equals `sentence`.
        """
        pass

    @abstractmethod
    async def define(self, word: str, context: str) -> str:
        """
        Define a word in at most 15 simple words.

        Args:
            word: Word or phrase to define.
            context: Sentence the word appears in.

        Returns:
            Trimmed definition text.
        """
        pass

    @abstractmethod
    async def optimize_image_query(self, request: ImageQueryOptimizationRequest) -> str:
        """
        Turn a word in context into a short visual search query.

        Returns:
            Search query of at most 4 words.

        Raises:
            ParseError: If the provider reply is not the expected JSON.
        """
        pass

    @abstractmethod
    def provider_name(self) -> str:
        pass

    @abstractmethod
    async def health_check(self) -> None:
        """Raise a GlossiaError if the provider is unreachable or misconfigured."""
        pass

    async def aclose(self) -> None:
        """Release network resources held by the client."""
        return None


class PromptedLLMClient(LLMClient):
    """
    Shared prompt building and reply parsing for completion-style providers.

    Subclasses only implement `_complete`, which sends one user prompt and
    returns the raw completion text.
    """

    @abstractmethod
    async def _complete(
        self,
        prompt: str,
        json_mode: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        pass

    async def simplify(self, sentence: str) -> SimplificationResponse:
        logger.info(f"[{self.provider_name()}] Simplifying sentence ({len(sentence)} chars)")
        content = await self._complete(build_simplification_prompt(sentence), json_mode=True)
        result = parse_simplification_response(content, sentence)
        logger.info(f"[{self.provider_name()}] Simplification complete: {len(result.words)} words identified")
        return result

    async def define(self, word: str, context: str) -> str:
        logger.info(f"[{self.provider_name()}] Getting meaning for word: '{word}'")
        content = await self._complete(
            build_word_meaning_prompt(word, context),
            temperature=DEFINE_TEMPERATURE,
            max_tokens=DEFINE_MAX_TOKENS,
        )
        return content.strip()

    async def optimize_image_query(self, request: ImageQueryOptimizationRequest) -> str:
        logger.info(f"[{self.provider_name()}] Optimizing image query for word: '{request.word}'")
        content = await self._complete(build_image_query_prompt(request), json_mode=True)
        query = parse_optimized_query(content)
        logger.info(f"[{self.provider_name()}] Optimized query for '{request.word}': '{query}'")
        return query


def _strip_code_fence(content: str) -> str:
    match = _CODE_FENCE.match(content.strip())
    return match.group(1) if match else content


def parse_simplification_response(content: str, original: str) -> SimplificationResponse:
    """
    Parse a simplification completion, degrading instead of failing.

    If the completion is not a JSON object the whole text becomes the
    simplified sentence and no words are reported.
    """
    try:
        parsed: Any = json.loads(_strip_code_fence(content))
    except ValueError:
        parsed = None

    if not isinstance(parsed, dict):
        logger.warning("Simplification reply was not JSON, using raw completion")
        return SimplificationResponse(original=original, simplified=content, words=[])

    simplified = parsed.get("simplified")
    if not isinstance(simplified, str):
        simplified = original

    words: List[WordMeaning] = []
    raw_words = parsed.get("words")
    if isinstance(raw_words, list):
        for entry in raw_words:
            if not isinstance(entry, dict):
                continue
            word = entry.get("word")
            meaning = entry.get("meaning")
            if not isinstance(word, str) or not isinstance(meaning, str):
                continue
            is_phrase = entry.get("is_phrase")
            words.append(
                WordMeaning(
                    word=word,
                    meaning=meaning,
                    is_phrase=is_phrase if isinstance(is_phrase, bool) else False,
                )
            )

    return SimplificationResponse(original=original, simplified=simplified, words=words)


def parse_optimized_query(content: str) -> str:
    """Extract `optimized_query` from a JSON reply."""
    try:
        parsed = json.loads(_strip_code_fence(content))
    except ValueError as e:
        raise ParseError(f"Invalid JSON response for image query optimization: {e}") from e

    query = parsed.get("optimized_query") if isinstance(parsed, dict) else None
    if not isinstance(query, str) or not query.strip():
        raise ParseError("Invalid JSON response for image query optimization: missing optimized_query")
    return query.strip()
