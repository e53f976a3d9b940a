import pytest

from crosspost.domain.errors import PublishValidationError
from crosspost.domain.ports import (
    Failure,
    MediaKind,
    PublishRequest,
    PublishResult,
    Success,
)


class TestPublishRequest:
    def test_missing_caption_rejected(self):
        with pytest.raises(PublishValidationError, match="caption"):
            PublishRequest(caption="", media_urls=("https://example.com/a.jpg",))

    def test_blank_caption_rejected(self):
        with pytest.raises(PublishValidationError):
            PublishRequest(caption="   ", media_urls=("https://example.com/a.jpg",))

    def test_empty_media_list_rejected(self):
        with pytest.raises(PublishValidationError, match="imageUrls"):
            PublishRequest(caption="Hello", media_urls=())

    def test_video_message_names_video_urls(self):
        with pytest.raises(PublishValidationError, match="videoUrls"):
            PublishRequest(caption="Hello", media_urls=(), media_kind=MediaKind.VIDEO)

    def test_text_prefixes_title(self):
        request = PublishRequest(
            caption="Great deal",
            media_urls=("https://example.com/a.jpg",),
            title="Peugeot 208",
        )
        assert request.text == "Peugeot 208\nGreat deal"

    def test_text_without_title(self):
        request = PublishRequest(caption="Great deal", media_urls=("https://example.com/a.jpg",))
        assert request.text == "Great deal"
        assert request.primary_url == "https://example.com/a.jpg"


class TestPublishResult:
    @pytest.fixture
    def result(self):
        result = PublishResult()
        result.record("facebook", Success({"id": "post_1"}))
        result.record("instagram", Failure("NoValidMedia", "No valid media for instagram"))
        result.record("linkedin", Failure("PlatformError", {"message": "Unauthorized"}))
        return result

    def test_summary(self, result):
        assert result.succeeded == ["facebook"]
        assert result.failed == ["instagram", "linkedin"]
        assert result.summary == "Published to 1/3 targets"

    def test_envelope_is_success_even_with_failures(self, result):
        envelope = result.to_envelope()

        assert envelope["success"] is True
        assert envelope["results"]["facebook"] == {"id": "post_1"}
        assert envelope["results"]["linkedin"] == {
            "error": {"kind": "PlatformError", "detail": {"message": "Unauthorized"}}
        }

    def test_envelope_round_trip_keeps_target_keys(self, result):
        parsed = PublishResult.from_envelope(result.to_envelope())

        assert set(parsed.outcomes) == {"facebook", "instagram", "linkedin"}
        assert parsed.outcomes == result.outcomes
