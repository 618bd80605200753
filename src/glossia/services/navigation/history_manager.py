"""History Manager - back/forward stack of visited positions."""

from typing import List, Optional

DEFAULT_MAX_HISTORY = 50


class HistoryManager:
    """
    Browser-style navigation history.

    Adding a position while in the middle of the history discards the
    forward entries. The list is capped; the oldest entry is dropped on
    overflow.
    """

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY):
        self._history: List[int] = []
        self._current_index: Optional[int] = None
        self._max_history = max(1, max_history)

    def add_position(self, position: int) -> None:
        if self._current_index is not None:
            del self._history[self._current_index + 1:]

        self._history.append(position)
        if len(self._history) > self._max_history:
            del self._history[0]

        self._current_index = len(self._history) - 1

    def go_back(self) -> Optional[int]:
        if not self.can_go_back():
            return None
        self._current_index -= 1
        return self._history[self._current_index]

    def go_forward(self) -> Optional[int]:
        if not self.can_go_forward():
            return None
        self._current_index += 1
        return self._history[self._current_index]

    def can_go_back(self) -> bool:
        return self._current_index is not None and self._current_index > 0

    def can_go_forward(self) -> bool:
        return self._current_index is not None and self._current_index + 1 < len(self._history)

    def current(self) -> Optional[int]:
        if self._current_index is None:
            return None
        return self._history[self._current_index]

    def clear(self) -> None:
        self._history.clear()
        self._current_index = None

    def set_max_history(self, max_history: int) -> None:
        """Change the cap, trimming the oldest entries if needed."""
        self._max_history = max(1, max_history)
        excess = len(self._history) - self._max_history
        if excess > 0:
            del self._history[:excess]
            if self._current_index is not None:
                self._current_index = max(0, self._current_index - excess)

    @property
    def max_history(self) -> int:
        return self._max_history

    def __len__(self) -> int:
        return len(self._history)
