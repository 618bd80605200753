"""Navigation strategies - what counts as one reading unit."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import List, Optional

from glossia.services.text_processing import extract_words, split_into_sentences


class NavigationStrategy(ABC):
    """
    Strategy interface for reading modes (sentence, paragraph, speed).

    Subclasses only decide how text is cut into units; cursor movement
    and progress are shared. When driven by NavigationService the cursor
    follows the service's position, including history jumps.
    """

    name: str = ""

    def __init__(self):
        self._units: List[str] = []
        self._position = 0
        self._units_processed = 0

    @abstractmethod
    def split_units(self, text: str) -> List[str]:
        """Cut text into the strategy's content units."""

    def load_text(self, text: str) -> None:
        self._units = self.split_units(text)
        self._position = 0
        self._units_processed = 0

    @property
    def units(self) -> List[str]:
        return list(self._units)

    def current_content(self) -> Optional[str]:
        if 0 <= self._position < len(self._units):
            return self._units[self._position]
        return None

    def next(self) -> bool:
        if self._position + 1 < len(self._units):
            self._position += 1
            self._units_processed += 1
            return True
        return False

    def previous(self) -> bool:
        if self._position > 0:
            self._position -= 1
            return True
        return False

    def seek(self, index: int) -> bool:
        """Place the cursor on `index` without counting it as a unit read."""
        if 0 <= index < len(self._units):
            self._position = index
            return True
        return False

    @property
    def position(self) -> int:
        return self._position

    def goto_progress(self, progress: float) -> bool:
        """Jump to the unit nearest to `progress` in [0.0, 1.0]."""
        if not self._units:
            return False
        progress = min(1.0, max(0.0, progress))
        # Half-up rounding so 0.5 steps land on the later unit.
        self._position = int(math.floor(progress * (len(self._units) - 1) + 0.5))
        return True

    def progress(self) -> float:
        if not self._units:
            return 0.0
        if len(self._units) == 1:
            return 1.0
        return self._position / (len(self._units) - 1)

    def is_at_beginning(self) -> bool:
        return self._position == 0

    def is_at_end(self) -> bool:
        return not self._units or self._position >= len(self._units) - 1

    def strategy_name(self) -> str:
        return self.name

    def recommended_wpm(self) -> Optional[int]:
        return None

    def recommended_pause_ms(self) -> Optional[int]:
        return None

    def units_processed(self) -> int:
        return self._units_processed

    def reset(self) -> None:
        self._position = 0
        self._units_processed = 0


class LinearStrategy(NavigationStrategy):
    name = "Linear"

    def split_units(self, text: str) -> List[str]:
        return split_into_sentences(text)


class ParagraphStrategy(NavigationStrategy):
    name = "Paragraph"

    def split_units(self, text: str) -> List[str]:
        paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
        if not paragraphs and text.strip():
            paragraphs = [text.strip()]
        return paragraphs

    def recommended_wpm(self) -> Optional[int]:
        return 200


class SpeedReadingStrategy(NavigationStrategy):
    """Fixed-size word windows paced by a words-per-minute target."""

    name = "SpeedReading"

    MIN_WPM = 100

    def __init__(self, chunk_size: int = 5, wpm: int = 300):
        super().__init__()
        self.chunk_size = max(1, chunk_size)
        self.wpm = max(self.MIN_WPM, wpm)

    def split_units(self, text: str) -> List[str]:
        words = extract_words(text)
        return [" ".join(words[i:i + self.chunk_size]) for i in range(0, len(words), self.chunk_size)]

    def recommended_wpm(self) -> Optional[int]:
        return self.wpm

    def recommended_pause_ms(self) -> Optional[int]:
        return int(60000 / self.wpm * self.chunk_size)


def create_navigation_strategy(name: str) -> NavigationStrategy:
    """Build a fresh strategy from its name (case-insensitive)."""
    normalized = name.strip().lower().replace("_", "").replace("-", "")
    if normalized in ("linear", "sentence"):
        return LinearStrategy()
    if normalized == "paragraph":
        return ParagraphStrategy()
    if normalized in ("speedreading", "speed", "chunk"):
        return SpeedReadingStrategy()
    raise ValueError(f"Unknown navigation strategy: {name}")
