"""Cache Engine - session caches for simplifications, meanings, images and queries."""

import hashlib
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from glossia.core import ImageResult, SimplificationResponse

logger = logging.getLogger(__name__)


def context_key(word: str, sentence: str) -> str:
    """
    Key for an optimized image query tied to one usage of a word.

    Format: "{word}_{hex digest of word and sentence}". A stable digest is
    used so keys match across processes.
    """
    digest = hashlib.sha256(f"{word}\x00{sentence}".encode("utf-8")).hexdigest()[:16]
    return f"{word}_{digest}"


@dataclass
class CacheStats:
    simplified: int
    word_meanings: int
    images: int
    optimized_queries: int

    @property
    def total(self) -> int:
        return self.simplified + self.word_meanings + self.images + self.optimized_queries


class CacheEngine:
    """
    Four independent string-keyed stores owned by the reading engine.

    - simplified: sentence -> SimplificationResponse
    - word meanings: lowercased word -> definition
    - images: lowercased word -> image results (shared across sentences)
    - optimized queries: context_key(word, sentence) -> search query

    Dict insertion order doubles as age, so pruning drops the oldest
    insertions first. Overwriting a key keeps its original position.
    """

    def __init__(self):
        self._simplified: Dict[str, SimplificationResponse] = {}
        self._word_meanings: Dict[str, str] = {}
        self._images: Dict[str, List[ImageResult]] = {}
        self._optimized_queries: Dict[str, str] = {}

    # Simplified sentences

    def get_simplified(self, sentence: str) -> Optional[SimplificationResponse]:
        return self._simplified.get(sentence)

    def cache_simplified(self, sentence: str, response: SimplificationResponse) -> None:
        self._simplified[sentence] = response

    def has_simplified(self, sentence: str) -> bool:
        return sentence in self._simplified

    # Word meanings

    def get_word_meaning(self, word: str) -> Optional[str]:
        return self._word_meanings.get(word.lower())

    def cache_word_meaning(self, word: str, meaning: str) -> None:
        self._word_meanings[word.lower()] = meaning

    def has_word_meaning(self, word: str) -> bool:
        return word.lower() in self._word_meanings

    # Images

    def get_images(self, word: str) -> Optional[List[ImageResult]]:
        images = self._images.get(word.lower())
        return list(images) if images is not None else None

    def cache_images(self, word: str, images: List[ImageResult]) -> None:
        self._images[word.lower()] = list(images)

    def has_images(self, word: str) -> bool:
        return word.lower() in self._images

    # Optimized image queries

    def get_optimized_query(self, key: str) -> Optional[str]:
        return self._optimized_queries.get(key)

    def cache_optimized_query(self, key: str, query: str) -> None:
        self._optimized_queries[key] = query

    def has_optimized_query(self, key: str) -> bool:
        return key in self._optimized_queries

    # Maintenance

    def clear_text_caches(self) -> None:
        """Drop everything derived from the loaded text; keep images."""
        self._simplified.clear()
        self._word_meanings.clear()
        self._optimized_queries.clear()

    def clear_all(self) -> None:
        self.clear_text_caches()
        self._images.clear()

    def cleanup_old_entries(self, max_entries: int) -> int:
        """
        Trim each store down to `max_entries`, oldest insertions first.

        Args:
            max_entries: Upper bound per store.

        Returns:
            Total number of entries removed.
        """
        removed = 0
        for store in (self._simplified, self._word_meanings, self._images, self._optimized_queries):
            excess = len(store) - max_entries
            if excess <= 0:
                continue
            for key in list(store)[:excess]:
                del store[key]
            removed += excess

        if removed:
            logger.debug(f"Cache cleanup removed {removed} entries (max {max_entries} per store)")
        return removed

    def get_stats(self) -> CacheStats:
        return CacheStats(
            simplified=len(self._simplified),
            word_meanings=len(self._word_meanings),
            images=len(self._images),
            optimized_queries=len(self._optimized_queries),
        )
