"""Position Tracker - clamped cursor over a list of reading units."""


class PositionTracker:
    """
    Tracks the current index into a list of `total` units.

    Invariant: 0 <= position < total, or total == 0 and position == 0.
    """

    def __init__(self, total: int = 0):
        self._total = max(0, total)
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    @property
    def total(self) -> int:
        return self._total

    def reset(self, total: int) -> None:
        self._total = max(0, total)
        self._position = 0

    def advance(self) -> bool:
        if self._position + 1 < self._total:
            self._position += 1
            return True
        return False

    def previous(self) -> bool:
        if self._position > 0:
            self._position -= 1
            return True
        return False

    def goto(self, index: int) -> bool:
        """Move to `index` if it is in range; returns False otherwise."""
        if 0 <= index < self._total:
            self._position = index
            return True
        return False

    def is_at_beginning(self) -> bool:
        return self._position == 0

    def is_at_end(self) -> bool:
        return self._total == 0 or self._position >= self._total - 1

    def remaining(self) -> int:
        """Units left after the current one."""
        if self._total == 0:
            return 0
        return self._total - 1 - self._position

    def progress(self) -> float:
        if self._total == 0:
            return 0.0
        return self._position / max(1, self._total - 1)
