"""Unit tests for CacheEngine."""

import pytest

from glossia.core import ImageResult, SimplificationResponse
from glossia.services.caching import CacheEngine, context_key


@pytest.fixture
def cache():
    """Provide a fresh cache instance for each test."""
    return CacheEngine()


def _response(sentence):
    return SimplificationResponse(original=sentence, simplified=f"simple {sentence}", words=[])


class TestCacheStores:
    def test_simplified_round_trip(self, cache):
        response = _response("A.")
        cache.cache_simplified("A.", response)
        assert cache.get_simplified("A.") is response
        assert cache.has_simplified("A.")
        assert cache.get_simplified("B.") is None

    def test_word_meanings_are_case_insensitive(self, cache):
        cache.cache_word_meaning("Hermit", "a recluse")
        assert cache.get_word_meaning("hermit") == "a recluse"
        assert cache.has_word_meaning("HERMIT")

    def test_images_are_case_insensitive_and_copied(self, cache):
        images = [ImageResult("u", "t", "title")]
        cache.cache_images("Sea", images)
        images.append(ImageResult("v", "t", "other"))

        cached = cache.get_images("sea")
        assert len(cached) == 1
        cached.clear()
        assert len(cache.get_images("sea")) == 1

    def test_optimized_queries_use_exact_keys(self, cache):
        key = context_key("hermit", "sea hermits rose")
        cache.cache_optimized_query(key, "hermit on sea")
        assert cache.get_optimized_query(key) == "hermit on sea"
        assert not cache.has_optimized_query(context_key("hermit", "another sentence"))


class TestContextKey:
    def test_format_and_stability(self):
        key = context_key("hermit", "sea hermits rose")
        assert key.startswith("hermit_")
        assert len(key) == len("hermit_") + 16
        assert key == context_key("hermit", "sea hermits rose")

    def test_sentence_changes_key(self):
        assert context_key("bank", "river bank") != context_key("bank", "bank account")


class TestMaintenance:
    """Tests for clearing and pruning."""

    def test_clear_text_caches_keeps_images(self, cache):
        cache.cache_simplified("A.", _response("A."))
        cache.cache_word_meaning("sea", "water")
        cache.cache_images("sea", [ImageResult("u", "t", "x")])
        cache.cache_optimized_query("k", "q")

        cache.clear_text_caches()

        stats = cache.get_stats()
        assert (stats.simplified, stats.word_meanings, stats.images, stats.optimized_queries) == (0, 0, 1, 0)

    def test_clear_all(self, cache):
        cache.cache_images("sea", [])
        cache.cache_word_meaning("sea", "water")
        cache.clear_all()
        assert cache.get_stats().total == 0

    def test_cleanup_removes_oldest_first(self, cache):
        for sentence in ["A.", "B.", "C.", "D."]:
            cache.cache_simplified(sentence, _response(sentence))
        cache.cache_word_meaning("one", "1")

        removed = cache.cleanup_old_entries(2)

        assert removed == 2
        assert not cache.has_simplified("A.")
        assert not cache.has_simplified("B.")
        assert cache.has_simplified("D.")
        assert cache.has_word_meaning("one")

    def test_cleanup_under_limit_removes_nothing(self, cache):
        cache.cache_simplified("A.", _response("A."))
        assert cache.cleanup_old_entries(10) == 0
