"""Vocabulary Manager - encounter counting, known words and manual marks."""

import logging
import time
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from glossia.core import WordMeaning
from glossia.io import VocabularyRepository

logger = logging.getLogger(__name__)

DEFAULT_PROMOTION_THRESHOLD = 12
LOADING_MEANING = "Loading..."

MeaningLookup = Callable[[str], Optional[str]]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def sort_for_display(words: Iterable[WordMeaning]) -> List[WordMeaning]:
    """Manual entries newest first, then provider entries in original order."""
    words = list(words)
    timestamped = [w for w in words if w.timestamp is not None]
    untimestamped = [w for w in words if w.timestamp is None]
    timestamped.sort(key=lambda w: w.timestamp, reverse=True)
    return timestamped + untimestamped


class VocabularyManager:
    """
    Application service for the learner's vocabulary.

    Known words and encounter counts are persistent and saved on every
    mutation; manual words are session-scoped. A word is never both known
    and counted: reaching the promotion threshold moves it from the
    counters to the known set in one step.
    """

    def __init__(
        self,
        repository: VocabularyRepository,
        promotion_threshold: int = DEFAULT_PROMOTION_THRESHOLD,
        clock_ms: Optional[Callable[[], int]] = None,
    ) -> None:
        if promotion_threshold <= 0:
            raise ValueError("promotion_threshold must be positive")
        self._repository = repository
        self.promotion_threshold = promotion_threshold
        self._clock_ms = clock_ms or _now_ms

        self._known_words: Set[str] = repository.load_known_words()
        self._word_counts: Dict[str, int] = {
            word: count
            for word, count in repository.load_encounters().items()
            if word not in self._known_words
        }
        self._manual_words: Set[str] = set()
        self._manual_timestamps: Dict[str, int] = {}
        self._last_timestamp = 0

        logger.info(
            f"Vocabulary loaded: {len(self._known_words)} known words, "
            f"{len(self._word_counts)} words in progress"
        )

    # Encounters and promotion

    def add_word_encounter(self, word: str) -> Tuple[int, bool]:
        """
        Record one sighting of a word.

        Args:
            word: Word as displayed; case is ignored.

        Returns:
            (new_count, became_known). A word that is already known returns
            (0, False) and is not counted.

        Raises:
            ConfigError: If saving fails; memory is already updated.
        """
        key = word.lower()
        if key in self._known_words:
            return 0, False

        count = self._word_counts.get(key, 0) + 1

        if count >= self.promotion_threshold:
            self._word_counts.pop(key, None)
            self._known_words.add(key)
            logger.info(f"Word '{key}' promoted to known after {count} encounters")
            self._save_all()
            return count, True

        self._word_counts[key] = count
        self._repository.save_encounters(self._word_counts)
        return count, False

    def track_sentence_encounters(self, words: Iterable[WordMeaning]) -> List[str]:
        """
        Count an encounter for each displayed difficult word.

        Returns:
            Words promoted to known by this call, in order.
        """
        promoted: List[str] = []
        seen: Set[str] = set()
        for meaning in words:
            key = meaning.word.lower()
            if key in seen:
                continue
            seen.add(key)
            _, became_known = self.add_word_encounter(key)
            if became_known:
                promoted.append(key)
        return promoted

    def get_encounter_count(self, word: str) -> int:
        return self._word_counts.get(word.lower(), 0)

    def get_word_progress(self, word: str) -> Tuple[int, int]:
        """(current_count, threshold); known words report the threshold."""
        key = word.lower()
        if key in self._known_words:
            return self.promotion_threshold, self.promotion_threshold
        return self._word_counts.get(key, 0), self.promotion_threshold

    # Known words

    def add_known_word(self, word: str) -> bool:
        """Mark a word as known. Returns True if it was not known before."""
        key = word.lower()
        was_new = key not in self._known_words
        had_count = self._word_counts.pop(key, None) is not None
        self._known_words.add(key)

        if had_count:
            self._save_all()
        elif was_new:
            self._repository.save_known_words(self._known_words)
        return was_new

    def remove_known_word(self, word: str) -> bool:
        """Forget a known word. Returns True if it was known."""
        key = word.lower()
        if key not in self._known_words:
            return False
        self._known_words.discard(key)
        self._repository.save_known_words(self._known_words)
        return True

    def is_known(self, word: str) -> bool:
        return word.lower() in self._known_words

    def filter_known_words(self, words: Iterable[WordMeaning]) -> List[WordMeaning]:
        return [w for w in words if w.word.lower() not in self._known_words]

    def known_words_count(self) -> int:
        return len(self._known_words)

    def get_all_known_words(self) -> List[str]:
        return sorted(self._known_words)

    # Manual words

    def add_manual_word(self, word: str) -> int:
        """
        Tag a word by hand for the current session.

        Returns:
            Insertion timestamp (ms). Timestamps are strictly increasing so
            display order is stable even within one millisecond.
        """
        key = word.lower()
        timestamp = max(self._clock_ms(), self._last_timestamp + 1)
        self._last_timestamp = timestamp
        self._manual_words.add(key)
        self._manual_timestamps[key] = timestamp
        return timestamp

    def remove_manual_word(self, word: str) -> bool:
        key = word.lower()
        if key not in self._manual_words:
            return False
        self._manual_words.discard(key)
        self._manual_timestamps.pop(key, None)
        return True

    def is_manual_word(self, word: str) -> bool:
        return word.lower() in self._manual_words

    def clear_manual_words(self) -> None:
        self._manual_words.clear()
        self._manual_timestamps.clear()

    def get_manual_words_sorted_by_time(self) -> List[Tuple[str, int]]:
        return sorted(self._manual_timestamps.items(), key=lambda item: item[1], reverse=True)

    def get_combined_words(
        self,
        api_words: List[WordMeaning],
        current_sentence: str,
        meaning_lookup: MeaningLookup,
    ) -> List[WordMeaning]:
        """
        Merge provider words with manual words relevant to a sentence.

        A manual word is appended when it is not already among `api_words`
        (case-insensitive) and appears in `current_sentence` as a
        case-insensitive substring. Its meaning comes from
        `meaning_lookup`, or "Loading..." while unresolved.
        """
        combined = list(api_words)
        present = {w.word.lower() for w in api_words}
        sentence_lower = current_sentence.lower()

        for word, timestamp in self.get_manual_words_sorted_by_time():
            if word in present or word not in sentence_lower:
                continue
            meaning = meaning_lookup(word)
            combined.append(
                WordMeaning(
                    word=word,
                    meaning=meaning if meaning is not None else LOADING_MEANING,
                    is_phrase=False,
                    timestamp=timestamp,
                )
            )
            present.add(word)

        return combined

    def _save_all(self) -> None:
        self._repository.save_known_words(self._known_words)
        self._repository.save_encounters(self._word_counts)
