"""Reading Engine - Central coordinator for the assisted-reading session."""

import asyncio
import logging
from typing import Dict, List, Optional, Set, Tuple

from glossia.core import (
    EmptyBookError,
    GlossiaError,
    ImageFetchState,
    ImageQueryOptimizationRequest,
    ImageResult,
    SimplificationResponse,
    WordMeaning,
    describe_error,
)
from glossia.services.caching import CacheEngine, context_key
from glossia.services.images import ImageClient
from glossia.services.llm import LLMClient
from glossia.services.navigation import NavigationService
from glossia.services.settings_manager import GlossiaSettings
from glossia.services.vocabulary import VocabularyManager, sort_for_display

from .session_stats import SessionStats

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_COUNT = 5


class ReadingEngine:
    """
    Facade over navigation, providers, caches and vocabulary.

    Responsibilities:
    - Load text and move through its sentences
    - Simplify sentences cache-first and prefetch the ones ahead
    - Resolve word meanings and illustrative images
    - Assemble the word list shown next to the current sentence
    - Track session statistics

    Provider errors propagate unchanged to the caller, except inside
    background prefetch tasks, which have no caller to report to.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        image_client: ImageClient,
        vocabulary: VocabularyManager,
        cache: Optional[CacheEngine] = None,
        navigation: Optional[NavigationService] = None,
        settings: Optional[GlossiaSettings] = None,
        stats: Optional[SessionStats] = None,
    ):
        self.llm_client = llm_client
        self.image_client = image_client
        self.vocabulary = vocabulary
        self.cache = cache or CacheEngine()
        self.navigation = navigation or NavigationService()
        self.settings = settings or GlossiaSettings()
        self.stats = stats or SessionStats()

        # Strong references so prefetch tasks are not garbage-collected mid-flight
        self._background_tasks: Set[asyncio.Task] = set()
        # Bumped whenever cached text results become invalid; stale prefetches check it before writing
        self._generation = 0

    # Text loading and navigation

    def load_text(self, text: str) -> int:
        """
        Load a new text and start a fresh session.

        Args:
            text: Raw text to read.

        Returns:
            Number of sentences found.

        Raises:
            EmptyBookError: If the text contains no sentences.
        """
        self._discard_background_tasks()
        sentences = self.navigation.load_text(text)
        self.vocabulary.clear_manual_words()
        self.cache.clear_text_caches()
        self.stats.reset()

        if not sentences:
            raise EmptyBookError()

        logger.info(f"Loaded text with {len(sentences)} sentences")
        return len(sentences)

    def current_sentence(self) -> Optional[str]:
        return self.navigation.current_sentence()

    def next(self) -> bool:
        return self.navigation.advance()

    def previous(self) -> bool:
        return self.navigation.previous()

    def go_back(self) -> bool:
        return self.navigation.go_back()

    def go_forward(self) -> bool:
        return self.navigation.go_forward()

    def goto(self, index: int) -> bool:
        return self.navigation.goto(index)

    def position(self) -> int:
        return self.navigation.position

    def total_sentences(self) -> int:
        return self.navigation.total_sentences

    def progress(self) -> float:
        return self.navigation.progress()

    def get_sentence_at_position(self, index: int) -> Optional[str]:
        return self.navigation.sentence_at(index)

    # Sentence processing

    async def process_sentence(self, sentence: str) -> SimplificationResponse:
        """
        Simplify a sentence, consulting the cache first.

        Raises:
            GlossiaError: Any provider failure; the cache is left untouched.
        """
        cached = self.cache.get_simplified(sentence)
        if cached is not None:
            logger.debug("Simplification cache hit")
            self._record_sentence_read(cached)
            return cached

        self.stats.is_processing = True
        try:
            response = await self.llm_client.simplify(sentence)
        except GlossiaError as e:
            self.stats.last_error = describe_error(e)
            raise
        finally:
            self.stats.is_processing = False

        self.cache.cache_simplified(sentence, response)
        self.stats.last_error = None
        self._record_sentence_read(response)
        return response

    async def process_current_sentence(self, lookahead: Optional[int] = None) -> Optional[SimplificationResponse]:
        """
        Simplify the current sentence, then schedule prefetch of the next ones.

        Returns:
            The simplification, or None if no text is loaded.
        """
        sentence = self.current_sentence()
        if sentence is None:
            return None

        response = await self.process_sentence(sentence)
        self.preprocess_next(self.settings.prefetch_lookahead if lookahead is None else lookahead)
        return response

    def _record_sentence_read(self, response: SimplificationResponse) -> None:
        self.stats.sentences_read += 1
        if not self.settings.auto_track_encounters:
            return
        shown = self.vocabulary.filter_known_words(response.words)
        promoted = self.vocabulary.track_sentence_encounters(shown)
        self.stats.words_learned += len(promoted)

    # Prefetch

    def preprocess_next(self, lookahead: int = 1) -> List[asyncio.Task]:
        """Schedule background simplification for sentences after the current one."""
        return self.preprocess_next_sentences(self.position(), self.navigation.sentences, lookahead)

    def preprocess_next_sentences(self, position: int, sentences: List[str], lookahead: int = 1) -> List[asyncio.Task]:
        """
        Schedule background simplification for `sentences[position+1 : position+1+lookahead]`.

        Sentences already cached are skipped. Must be called from a running
        event loop.

        Returns:
            The scheduled tasks.
        """
        scheduled: List[asyncio.Task] = []
        for sentence in sentences[position + 1 : position + 1 + lookahead]:
            if self.cache.has_simplified(sentence):
                continue
            task = asyncio.create_task(self._prefetch(sentence, self._generation))
            self._background_tasks.add(task)
            task.add_done_callback(self._background_tasks.discard)
            scheduled.append(task)

        if scheduled:
            logger.debug(f"Scheduled prefetch for {len(scheduled)} sentence(s)")
        return scheduled

    async def _prefetch(self, sentence: str, generation: int) -> None:
        try:
            response = await self.llm_client.simplify(sentence)
        except GlossiaError as e:
            logger.warning(f"Background prefetch failed: {e}", extra={"error_kind": e.kind})
            return

        if generation != self._generation:
            logger.debug("Dropping prefetch result from a previous text or provider")
            return

        # Another caller may have filled the slot while we were waiting
        if not self.cache.has_simplified(sentence):
            self.cache.cache_simplified(sentence, response)

    def _discard_background_tasks(self) -> None:
        """Cancel in-flight prefetches and invalidate any result still on its way."""
        self._generation += 1
        if self._background_tasks:
            logger.debug(f"Cancelling {len(self._background_tasks)} prefetch task(s)")
        for task in self._background_tasks:
            task.cancel()
        self._background_tasks.clear()

    async def wait_for_background_tasks(self) -> None:
        """Await every prefetch currently in flight."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    # Words and images

    async def get_word_meaning(self, word: str, context: str) -> str:
        """Return a short definition of `word`, cached by lowercased word."""
        cached = self.cache.get_word_meaning(word)
        if cached is not None:
            return cached

        meaning = await self.llm_client.define(word, context)
        self.cache.cache_word_meaning(word, meaning)
        return meaning

    async def optimize_and_fetch_images(
        self,
        word: str,
        sentence: str,
        meaning: str,
        count: int = DEFAULT_IMAGE_COUNT,
    ) -> List[ImageResult]:
        """
        Find images illustrating a word as used in a sentence.

        The search query is produced by the LLM and cached per (word,
        sentence); if the LLM fails the literal word is searched instead.
        Results are cached by word.

        Raises:
            GlossiaError: If the image search itself fails.
        """
        cached = self.cache.get_images(word)
        if cached is not None:
            return cached

        query = await self._resolve_image_query(word, sentence, meaning)
        images = await self.image_client.search_images(query, count)
        self.cache.cache_images(word, images)
        logger.info(f"Fetched {len(images)} images for '{word}' using query '{query}'")
        return images

    async def _resolve_image_query(self, word: str, sentence: str, meaning: str) -> str:
        key = context_key(word, sentence)
        cached = self.cache.get_optimized_query(key)
        if cached is not None:
            return cached

        request = ImageQueryOptimizationRequest(word=word, sentence_context=sentence, word_meaning=meaning)
        try:
            query = await self.llm_client.optimize_image_query(request)
        except GlossiaError as e:
            logger.warning(f"Image query optimization failed for '{word}', using the word itself: {e}")
            return word

        self.cache.cache_optimized_query(key, query)
        return query

    async def fetch_image_state(
        self,
        word: str,
        sentence: str,
        meaning: str,
        count: int = DEFAULT_IMAGE_COUNT,
    ) -> ImageFetchState:
        """Like optimize_and_fetch_images, but reports failure as a state for the word panel."""
        try:
            images = await self.optimize_and_fetch_images(word, sentence, meaning, count)
        except GlossiaError as e:
            logger.warning(f"Image fetch failed for '{word}': {e}")
            return ImageFetchState.failed(describe_error(e))
        return ImageFetchState.loaded(images)

    def get_combined_words(self, api_words: List[WordMeaning]) -> List[WordMeaning]:
        """Provider words plus manual words present in the current sentence."""
        return self.vocabulary.get_combined_words(
            api_words,
            self.current_sentence() or "",
            self.cache.get_word_meaning,
        )

    def get_display_words(self, api_words: List[WordMeaning]) -> List[WordMeaning]:
        """Combined words without known ones, newest manual entries first."""
        combined = self.get_combined_words(api_words)
        return sort_for_display(self.vocabulary.filter_known_words(combined))

    # Vocabulary

    def add_manual_word(self, word: str) -> int:
        return self.vocabulary.add_manual_word(word)

    def remove_manual_word(self, word: str) -> bool:
        return self.vocabulary.remove_manual_word(word)

    def add_word_encounter(self, word: str) -> Tuple[int, bool]:
        count, became_known = self.vocabulary.add_word_encounter(word)
        if became_known:
            self.stats.words_learned += 1
        return count, became_known

    def add_known_word(self, word: str) -> bool:
        return self.vocabulary.add_known_word(word)

    def remove_known_word(self, word: str) -> bool:
        return self.vocabulary.remove_known_word(word)

    def filter_known_words(self, words: List[WordMeaning]) -> List[WordMeaning]:
        return self.vocabulary.filter_known_words(words)

    def known_words_count(self) -> int:
        return self.vocabulary.known_words_count()

    def get_all_known_words(self) -> List[str]:
        return self.vocabulary.get_all_known_words()

    # Maintenance

    async def health_check(self) -> Dict[str, Optional[str]]:
        """
        Probe both providers.

        Returns:
            "llm" and "images" mapped to None when healthy, else a
            user-facing error message.
        """
        results: Dict[str, Optional[str]] = {}
        for role, client in (("llm", self.llm_client), ("images", self.image_client)):
            try:
                await client.health_check()
                results[role] = None
            except GlossiaError as e:
                logger.warning(f"Health check failed for {client.provider_name()}: {e}")
                results[role] = describe_error(e)
        return results

    def cleanup_cache(self, max_entries: int) -> int:
        return self.cache.cleanup_old_entries(max_entries)

    def set_llm_client(self, client: LLMClient) -> None:
        """Swap the language-model provider; cached text results are discarded."""
        logger.info(f"Switching LLM provider from {self.llm_client.provider_name()} to {client.provider_name()}")
        self._discard_background_tasks()
        self.llm_client = client
        self.cache.clear_text_caches()

    async def aclose(self) -> None:
        await self.wait_for_background_tasks()
        await self.llm_client.aclose()
        await self.image_client.aclose()
