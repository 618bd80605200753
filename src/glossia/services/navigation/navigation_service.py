"""Navigation Service - sentence list, cursor and back/forward history."""

from typing import List, Optional, Tuple

from glossia.services.navigation.history_manager import HistoryManager
from glossia.services.navigation.navigation_strategies import LinearStrategy, NavigationStrategy
from glossia.services.navigation.position_tracker import PositionTracker


class NavigationService:
    """
    Pure in-memory navigator over the units of a loaded text.

    The strategy decides what a unit is (sentence by default). Every
    move that changes position is recorded in history so go_back and
    go_forward can replay it.
    """

    def __init__(self, strategy: Optional[NavigationStrategy] = None, max_history: int = 50):
        self.strategy = strategy or LinearStrategy()
        self._units: List[str] = []
        self._tracker = PositionTracker()
        self._history = HistoryManager(max_history=max_history)

    def load_text(self, text: str) -> List[str]:
        """
        Replace the loaded text, resetting position and history.

        Returns:
            The units produced by the strategy (empty for blank text).
        """
        self.strategy.load_text(text)
        self._units = self.strategy.units
        self._tracker.reset(len(self._units))
        self._history.clear()
        return list(self._units)

    def _record_move(self, old_position: int, moved: bool) -> bool:
        if moved:
            if self._history.current() != old_position:
                self._history.add_position(old_position)
            self._history.add_position(self._tracker.position)
        return moved

    def _jump(self, index: int) -> bool:
        if not self._tracker.goto(index):
            return False
        self.strategy.seek(index)
        return True

    def advance(self) -> bool:
        old = self._tracker.position
        moved = self.strategy.next()
        if moved:
            self._tracker.advance()
        return self._record_move(old, moved)

    def previous(self) -> bool:
        old = self._tracker.position
        moved = self.strategy.previous()
        if moved:
            self._tracker.previous()
        return self._record_move(old, moved)

    def goto(self, index: int) -> bool:
        old = self._tracker.position
        if index == old:
            return False
        return self._record_move(old, self._jump(index))

    def go_back(self) -> bool:
        position = self._history.go_back()
        if position is None:
            return False
        return self._jump(position)

    def go_forward(self) -> bool:
        position = self._history.go_forward()
        if position is None:
            return False
        return self._jump(position)

    def can_go_back(self) -> bool:
        return self._history.can_go_back()

    def can_go_forward(self) -> bool:
        return self._history.can_go_forward()

    def set_max_history(self, max_history: int) -> None:
        self._history.set_max_history(max_history)

    @property
    def sentences(self) -> List[str]:
        return list(self._units)

    @property
    def position(self) -> int:
        return self._tracker.position

    @property
    def total_sentences(self) -> int:
        return len(self._units)

    def current_sentence(self) -> Optional[str]:
        return self.sentence_at(self._tracker.position)

    def sentence_at(self, index: int) -> Optional[str]:
        if 0 <= index < len(self._units):
            return self._units[index]
        return None

    def upcoming(self, lookahead: int = 1) -> List[Tuple[int, str]]:
        """(index, sentence) pairs for the next `lookahead` sentences."""
        start = self._tracker.position + 1
        end = min(len(self._units), start + max(0, lookahead))
        return [(i, self._units[i]) for i in range(start, end)]

    def progress(self) -> float:
        return self._tracker.progress()

    def is_at_beginning(self) -> bool:
        return self._tracker.is_at_beginning()

    def is_at_end(self) -> bool:
        return self._tracker.is_at_end()

    def is_empty(self) -> bool:
        return not self._units

    def remaining(self) -> int:
        return self._tracker.remaining()

    def units_processed(self) -> int:
        """Forward steps taken with advance since the text was loaded."""
        return self.strategy.units_processed()
