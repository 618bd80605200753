"""Navigation services - position, history and reading-unit strategies."""

from glossia.services.navigation.history_manager import DEFAULT_MAX_HISTORY, HistoryManager
from glossia.services.navigation.navigation_service import NavigationService
from glossia.services.navigation.navigation_strategies import (
    LinearStrategy,
    NavigationStrategy,
    ParagraphStrategy,
    SpeedReadingStrategy,
    create_navigation_strategy,
)
from glossia.services.navigation.position_tracker import PositionTracker

__all__ = [
    "NavigationService",
    "NavigationStrategy",
    "LinearStrategy",
    "ParagraphStrategy",
    "SpeedReadingStrategy",
    "create_navigation_strategy",
    "HistoryManager",
    "DEFAULT_MAX_HISTORY",
    "PositionTracker",
]
