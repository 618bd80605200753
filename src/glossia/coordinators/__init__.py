"""Coordinators - Orchestration layer connecting the reader with business logic."""

from .reading_engine import DEFAULT_IMAGE_COUNT, ReadingEngine
from .session_stats import SessionStats

__all__ = [
    "ReadingEngine",
    "SessionStats",
    "DEFAULT_IMAGE_COUNT",
]
