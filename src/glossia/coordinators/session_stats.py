"""Session Stats - reading-session counters and derived rates."""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

Clock = Callable[[], float]


@dataclass
class SessionStats:
    """Counters for the current reading session. Times are in seconds."""

    clock: Clock = field(default=time.monotonic, repr=False, compare=False)
    is_processing: bool = False
    last_error: Optional[str] = None
    sentences_read: int = 0
    words_learned: int = 0
    session_start: float = field(default=0.0)

    def __post_init__(self):
        if not self.session_start:
            self.session_start = self.clock()

    def elapsed_minutes(self) -> float:
        return max(0.0, self.clock() - self.session_start) / 60.0

    def sentences_per_minute(self) -> float:
        minutes = self.elapsed_minutes()
        if minutes <= 0:
            return 0.0
        return self.sentences_read / minutes

    def words_per_minute(self) -> float:
        """Known-word promotions per minute."""
        minutes = self.elapsed_minutes()
        if minutes <= 0:
            return 0.0
        return self.words_learned / minutes

    def reset(self) -> None:
        self.is_processing = False
        self.last_error = None
        self.sentences_read = 0
        self.words_learned = 0
        self.session_start = self.clock()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "is_processing": self.is_processing,
            "last_error": self.last_error,
            "sentences_read": self.sentences_read,
            "words_learned": self.words_learned,
            "elapsed_minutes": round(self.elapsed_minutes(), 2),
            "sentences_per_minute": round(self.sentences_per_minute(), 2),
            "words_per_minute": round(self.words_per_minute(), 2),
        }
