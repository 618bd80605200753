"""Vocabulary services - learner progress tracking."""

from glossia.services.vocabulary.vocabulary_manager import (
    DEFAULT_PROMOTION_THRESHOLD,
    LOADING_MEANING,
    VocabularyManager,
    sort_for_display,
)

__all__ = [
    "VocabularyManager",
    "DEFAULT_PROMOTION_THRESHOLD",
    "LOADING_MEANING",
    "sort_for_display",
]
