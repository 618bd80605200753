"""Tests for ReadingEngine with mock providers."""

import asyncio

import pytest

from glossia.coordinators import ReadingEngine, SessionStats
from glossia.core import ApiError, EmptyBookError, HttpError, ImageFetchStatus, ImageResult, SimplificationResponse, WordMeaning
from glossia.services import GlossiaSettings
from glossia.services.caching import context_key
from glossia.services.images import MockImageClient
from glossia.services.llm import MockLLMClient

TEXT = "The hermit rose. The sea was calm. Birds flew home."
FIRST, SECOND, THIRD = "The hermit rose.", "The sea was calm.", "Birds flew home."


@pytest.fixture
def engine(mock_llm, mock_images, vocabulary, fake_clock):
    """Provide an engine wired to mock providers and an in-memory vocabulary."""
    return ReadingEngine(mock_llm, mock_images, vocabulary, stats=SessionStats(clock=fake_clock))


@pytest.fixture
def loaded(engine):
    engine.load_text(TEXT)
    return engine


class TestLoadingAndNavigation:
    def test_load_text(self, engine):
        assert engine.load_text(TEXT) == 3
        assert engine.current_sentence() == FIRST
        assert engine.total_sentences() == 3

    def test_empty_text_resets_then_raises(self, loaded):
        """Loading blank text should clear the session before failing."""
        loaded.add_manual_word("sea")
        loaded.stats.sentences_read = 5

        with pytest.raises(EmptyBookError):
            loaded.load_text("   \n ")

        assert loaded.stats.sentences_read == 0
        assert loaded.total_sentences() == 0
        assert loaded.current_sentence() is None
        assert not loaded.vocabulary.is_manual_word("sea")

    def test_reload_keeps_images_and_drops_text_state(self, loaded):
        """A new text should keep fetched images but forget everything tied to the old text."""
        loaded.cache.cache_simplified(FIRST, SimplificationResponse(FIRST, "simple", []))
        loaded.cache.cache_word_meaning("hermit", "a recluse")
        loaded.cache.cache_optimized_query(context_key("hermit", FIRST), "lonely monk")
        loaded.cache.cache_images("hermit", [ImageResult("https://img.test/h.jpg", "https://img.test/h_t.jpg", "Hermit")])
        loaded.add_manual_word("hermit")

        loaded.load_text("A new story begins.")

        stats = loaded.cache.get_stats()
        assert (stats.simplified, stats.word_meanings, stats.optimized_queries, stats.images) == (0, 0, 0, 1)
        assert loaded.cache.get_images("hermit")[0].url == "https://img.test/h.jpg"
        assert not loaded.vocabulary.is_manual_word("hermit")

    def test_navigation_pass_through(self, loaded):
        assert loaded.next()
        assert loaded.goto(2)
        assert loaded.go_back()
        assert loaded.position() == 1
        assert loaded.go_forward()
        assert loaded.current_sentence() == THIRD
        assert loaded.progress() == 1.0
        assert loaded.get_sentence_at_position(0) == FIRST
        assert loaded.previous()


class TestProcessSentence:
    """Tests for cache-first simplification."""

    @pytest.mark.asyncio
    async def test_second_call_hits_cache(self, loaded, mock_llm):
        first = await loaded.process_sentence(FIRST)
        second = await loaded.process_sentence(FIRST)

        assert first is second
        assert first.simplified == f"Simplified: {FIRST}"
        assert mock_llm.call_count("simplify") == 1
        assert loaded.stats.sentences_read == 2

    @pytest.mark.asyncio
    async def test_failure_records_error_and_skips_cache(self, loaded, mock_llm):
        mock_llm.add_response(FIRST, ApiError("quota exceeded"))

        with pytest.raises(ApiError):
            await loaded.process_sentence(FIRST)

        assert loaded.stats.last_error == "The service reported a problem: quota exceeded"
        assert not loaded.stats.is_processing
        assert not loaded.cache.has_simplified(FIRST)
        assert loaded.stats.sentences_read == 0

        del mock_llm.custom_responses[FIRST]
        await loaded.process_sentence(FIRST)
        assert loaded.stats.last_error is None

    @pytest.mark.asyncio
    async def test_no_text_loaded(self, engine):
        assert await engine.process_current_sentence() is None

    @pytest.mark.asyncio
    async def test_auto_tracking_promotes_words(self, mock_llm, mock_images, vocabulary, fake_clock):
        """With auto-tracking on, each processed sentence counts its shown words."""
        engine = ReadingEngine(
            mock_llm,
            mock_images,
            vocabulary,
            settings=GlossiaSettings(auto_track_encounters=True),
            stats=SessionStats(clock=fake_clock),
        )
        engine.load_text(TEXT)
        for sentence in (FIRST, SECOND, THIRD):
            mock_llm.add_response(
                sentence,
                SimplificationResponse(sentence, "simple", [WordMeaning("hermit", "a recluse")]),
            )

        for sentence in (FIRST, SECOND, THIRD):
            await engine.process_sentence(sentence)

        assert vocabulary.is_known("hermit")
        assert engine.stats.words_learned == 1

        await engine.process_sentence(FIRST)
        assert engine.stats.words_learned == 1

    @pytest.mark.asyncio
    async def test_tracking_is_off_by_default(self, loaded, mock_llm):
        mock_llm.add_response(FIRST, SimplificationResponse(FIRST, "simple", [WordMeaning("hermit", "a recluse")]))
        await loaded.process_sentence(FIRST)
        assert loaded.vocabulary.get_encounter_count("hermit") == 0


class TestPrefetch:
    @pytest.mark.asyncio
    async def test_prefetches_lookahead_sentences(self, loaded, mock_llm):
        await loaded.process_current_sentence(lookahead=2)
        await loaded.wait_for_background_tasks()

        assert loaded.cache.has_simplified(SECOND)
        assert loaded.cache.has_simplified(THIRD)
        assert mock_llm.call_count("simplify") == 3

        loaded.next()
        await loaded.process_current_sentence(lookahead=0)
        assert mock_llm.call_count("simplify") == 3

    @pytest.mark.asyncio
    async def test_prefetch_does_not_count_as_read(self, loaded):
        await loaded.process_current_sentence(lookahead=2)
        await loaded.wait_for_background_tasks()
        assert loaded.stats.sentences_read == 1

    @pytest.mark.asyncio
    async def test_cached_sentences_are_skipped(self, loaded):
        loaded.cache.cache_simplified(SECOND, SimplificationResponse(SECOND, "cached", []))

        tasks = loaded.preprocess_next(2)
        await loaded.wait_for_background_tasks()

        assert len(tasks) == 1
        assert loaded.cache.get_simplified(SECOND).simplified == "cached"

    @pytest.mark.asyncio
    async def test_prefetch_failure_is_dropped(self, loaded, mock_llm):
        """A failing background call should neither raise nor populate the cache."""
        mock_llm.add_response(SECOND, ApiError("down"))

        await loaded.process_current_sentence(lookahead=1)
        await loaded.wait_for_background_tasks()

        assert not loaded.cache.has_simplified(SECOND)
        assert loaded.stats.last_error is None

    @pytest.mark.asyncio
    async def test_default_lookahead_from_settings(self, loaded, mock_llm):
        await loaded.process_current_sentence()
        await loaded.wait_for_background_tasks()
        assert loaded.cache.has_simplified(SECOND)
        assert not loaded.cache.has_simplified(THIRD)

    @pytest.mark.asyncio
    async def test_aclose_waits_for_prefetch(self, vocabulary, mock_images):
        engine = ReadingEngine(MockLLMClient(delay=0.01), mock_images, vocabulary)
        engine.load_text(TEXT)
        await engine.process_current_sentence(lookahead=1)

        await engine.aclose()

        assert engine.cache.has_simplified(SECOND)


class TestWordsAndImages:
    @pytest.mark.asyncio
    async def test_word_meaning_is_cached_case_insensitively(self, loaded, mock_llm):
        first = await loaded.get_word_meaning("Hermit", FIRST)
        second = await loaded.get_word_meaning("hermit", FIRST)

        assert first == second == "Mock meaning for 'Hermit'"
        assert mock_llm.call_count("define") == 1

    @pytest.mark.asyncio
    async def test_images_use_optimized_query_and_cache(self, loaded, mock_images):
        images = await loaded.optimize_and_fetch_images("hermit", FIRST, "a recluse")
        again = await loaded.optimize_and_fetch_images("hermit", FIRST, "a recluse")

        assert len(images) == 5
        assert again == images
        assert mock_images.queries == ["optimized hermit"]
        assert loaded.cache.get_optimized_query(context_key("hermit", FIRST)) == "optimized hermit"

    @pytest.mark.asyncio
    async def test_query_failure_falls_back_to_word(self, loaded, mock_llm, mock_images):
        """An LLM failure should not stop the image search."""
        mock_llm.add_response("hermit", HttpError(500, "server error"))

        images = await loaded.optimize_and_fetch_images("hermit", FIRST, "a recluse", count=2)

        assert mock_images.queries == ["hermit"]
        assert len(images) == 2
        assert loaded.cache.get_optimized_query(context_key("hermit", FIRST)) is None
        assert loaded.cache.get_images("hermit") == images

    @pytest.mark.asyncio
    async def test_search_failure_propagates(self, mock_llm, vocabulary):
        engine = ReadingEngine(mock_llm, MockImageClient(should_fail=True), vocabulary)
        with pytest.raises(ApiError):
            await engine.optimize_and_fetch_images("hermit", FIRST, "a recluse")
        assert engine.cache.get_images("hermit") is None

    @pytest.mark.asyncio
    async def test_fetch_image_state(self, loaded, mock_llm, vocabulary):
        state = await loaded.fetch_image_state("hermit", FIRST, "a recluse", count=3)
        assert state.status is ImageFetchStatus.LOADED
        assert len(state.images) == 3

        failing = ReadingEngine(mock_llm, MockImageClient(should_fail=True), vocabulary)
        state = await failing.fetch_image_state("sea", SECOND, "water")
        assert state.is_error
        assert state.error == "The service reported a problem: Mock image client configured to fail"

    def test_display_words(self, loaded):
        """Manual words come first, known words are hidden."""
        loaded.add_known_word("calm")
        loaded.add_manual_word("hermit")
        loaded.cache.cache_word_meaning("hermit", "a recluse")

        words = loaded.get_display_words([WordMeaning("rose", "got up"), WordMeaning("calm", "quiet")])

        assert [(w.word, w.meaning) for w in words] == [("hermit", "a recluse"), ("rose", "got up")]

    def test_manual_word_without_meaning_shows_loading(self, loaded):
        loaded.add_manual_word("hermit")
        words = loaded.get_combined_words([])
        assert words[0].meaning == "Loading..."


class TestVocabularyAndMaintenance:
    def test_promotion_counts_as_learned(self, loaded):
        for _ in range(2):
            assert loaded.add_word_encounter("sea")[1] is False
        assert loaded.add_word_encounter("sea") == (3, True)
        assert loaded.stats.words_learned == 1
        assert loaded.get_all_known_words() == ["sea"]
        assert loaded.known_words_count() == 1

    @pytest.mark.asyncio
    async def test_health_check_reports_each_provider(self, loaded):
        assert await loaded.health_check() == {"llm": None, "images": None}

    @pytest.mark.asyncio
    async def test_health_check_reports_failures(self, vocabulary):
        engine = ReadingEngine(MockLLMClient(should_fail=ApiError("down")), MockImageClient(should_fail=True), vocabulary)
        report = await engine.health_check()
        assert report["llm"] == "The service reported a problem: down"
        assert report["images"] == "The service reported a problem: Mock image client health check failed"

    @pytest.mark.asyncio
    async def test_switching_llm_clears_text_caches(self, loaded):
        await loaded.process_sentence(FIRST)
        await loaded.get_word_meaning("hermit", FIRST)
        replacement = MockLLMClient()

        loaded.set_llm_client(replacement)

        assert loaded.llm_client is replacement
        assert not loaded.cache.has_simplified(FIRST)
        assert not loaded.cache.has_word_meaning("hermit")

    @pytest.mark.asyncio
    async def test_cleanup_cache(self, loaded):
        for sentence in (FIRST, SECOND, THIRD):
            await loaded.process_sentence(sentence)
        assert loaded.cleanup_cache(1) == 2
        assert loaded.cache.has_simplified(THIRD)


class TestStalePrefetch:
    """In-flight prefetches must not leak into a reloaded or re-provisioned session."""

    @pytest.mark.asyncio
    async def test_provider_switch_discards_old_prefetch(self, vocabulary, mock_images):
        engine = ReadingEngine(MockLLMClient(delay=0.05), mock_images, vocabulary)
        engine.load_text("One here. Two there.")
        tasks = engine.preprocess_next(1)
        await asyncio.sleep(0.01)

        engine.set_llm_client(MockLLMClient({"Two there.": "NEW MODEL"}))
        await engine.wait_for_background_tasks()
        await asyncio.sleep(0.06)

        assert tasks[0].cancelled()
        assert not engine.cache.has_simplified("Two there.")
        response = await engine.process_sentence("Two there.")
        assert response.simplified == "NEW MODEL"

    @pytest.mark.asyncio
    async def test_reload_discards_old_prefetch(self, vocabulary, mock_images):
        engine = ReadingEngine(MockLLMClient(delay=0.05), mock_images, vocabulary)
        engine.load_text("One here. Two there.")
        engine.preprocess_next(1)
        await asyncio.sleep(0.01)

        engine.load_text("Completely new text.")
        await engine.wait_for_background_tasks()
        await asyncio.sleep(0.06)

        assert engine.cache.get_stats().simplified == 0

    @pytest.mark.asyncio
    async def test_result_from_old_generation_is_not_cached(self, loaded):
        """A prefetch that finishes after the session moved on should be dropped."""
        stale = loaded._generation
        loaded.load_text(TEXT)

        await loaded._prefetch(SECOND, stale)

        assert not loaded.cache.has_simplified(SECOND)
