"""I/O layer - vocabulary persistence."""

from .vocabulary_repository import (
    InMemoryVocabularyRepository,
    JsonVocabularyRepository,
    VocabularyRepository,
    default_vocabulary_dir,
)

__all__ = [
    "VocabularyRepository",
    "InMemoryVocabularyRepository",
    "JsonVocabularyRepository",
    "default_vocabulary_dir",
]
