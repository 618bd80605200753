"""Reading entities shared by providers, caches and the reading engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass
class WordMeaning:
    """
    A difficult word or phrase with its short definition.

    `timestamp` (ms since epoch) is only set for words the reader marked
    by hand; LLM-annotated words leave it as None.
    """

    word: str
    meaning: str
    is_phrase: bool = False
    timestamp: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "word": self.word,
            "meaning": self.meaning,
            "is_phrase": self.is_phrase,
        }
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WordMeaning":
        return cls(
            word=data["word"],
            meaning=data["meaning"],
            is_phrase=bool(data.get("is_phrase", False)),
            timestamp=data.get("timestamp"),
        )


@dataclass
class SimplificationResponse:
    """Simplified rewrite of a sentence and its annotated words."""

    original: str
    simplified: str
    words: List[WordMeaning] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original": self.original,
            "simplified": self.simplified,
            "words": [w.to_dict() for w in self.words],
        }


@dataclass
class ImageResult:
    """A single image search hit."""

    url: str
    thumbnail_url: str
    title: str
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass
class ImageQueryOptimizationRequest:
    """Inputs for turning a word in context into a visual search query."""

    word: str
    sentence_context: str
    word_meaning: str


class ImageFetchStatus(Enum):
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass
class ImageFetchState:
    """Per-word image fetch state held by the presentation layer."""

    status: ImageFetchStatus
    images: List[ImageResult] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def loading(cls) -> "ImageFetchState":
        return cls(status=ImageFetchStatus.LOADING)

    @classmethod
    def loaded(cls, images: List[ImageResult]) -> "ImageFetchState":
        return cls(status=ImageFetchStatus.LOADED, images=list(images))

    @classmethod
    def failed(cls, message: str) -> "ImageFetchState":
        return cls(status=ImageFetchStatus.ERROR, error=message)

    @property
    def is_error(self) -> bool:
        """True if the fetch failed."""
        return self.status is ImageFetchStatus.ERROR
