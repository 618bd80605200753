"""Unit tests for reading entities."""

from glossia.core import ImageFetchState, ImageFetchStatus, ImageResult, SimplificationResponse, WordMeaning


class TestWordMeaning:
    def test_timestamp_only_serialized_when_set(self):
        assert "timestamp" not in WordMeaning("sea", "water").to_dict()
        assert WordMeaning("sea", "water", timestamp=5).to_dict()["timestamp"] == 5

    def test_from_dict_defaults(self):
        meaning = WordMeaning.from_dict({"word": "hermit", "meaning": "a recluse"})
        assert meaning.is_phrase is False
        assert meaning.timestamp is None


class TestSimplificationResponse:
    def test_to_dict(self):
        response = SimplificationResponse("A.", "B.", [WordMeaning("a", "b", is_phrase=True)])
        assert response.to_dict() == {
            "original": "A.",
            "simplified": "B.",
            "words": [{"word": "a", "meaning": "b", "is_phrase": True}],
        }


class TestImageFetchState:
    def test_states(self):
        images = [ImageResult("u", "t", "title")]

        assert ImageFetchState.loading().status is ImageFetchStatus.LOADING
        loaded = ImageFetchState.loaded(images)
        assert loaded.images == images and not loaded.is_error

        failed = ImageFetchState.failed("boom")
        assert failed.is_error
        assert failed.error == "boom"
        assert failed.images == []
