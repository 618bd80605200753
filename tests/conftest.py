"""Shared fixtures for time control and provider doubles."""

from typing import List

import pytest

from glossia.io import InMemoryVocabularyRepository
from glossia.services.images import MockImageClient
from glossia.services.llm import MockLLMClient
from glossia.services.vocabulary import VocabularyManager


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep replacement that records delays and returns immediately."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def vocabulary_repo():
    """In-memory repository so tests never touch the home directory."""
    return InMemoryVocabularyRepository()


@pytest.fixture
def vocabulary(vocabulary_repo):
    return VocabularyManager(vocabulary_repo, promotion_threshold=3)


@pytest.fixture
def mock_llm():
    return MockLLMClient()


@pytest.fixture
def mock_images():
    return MockImageClient()
