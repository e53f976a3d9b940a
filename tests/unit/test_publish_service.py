from unittest.mock import AsyncMock

import pytest

from crosspost.application.dtos import PublishPostDTO
from crosspost.application.services import PublishService
from crosspost.domain.errors import PublishValidationError
from crosspost.domain.ports import Failure, MediaKind, PublishResult, Success


class TestPublishService:
    @pytest.fixture
    def mock_publisher(self):
        publisher = AsyncMock()
        result = PublishResult()
        result.record("facebook", Success({"id": "post_1"}))
        result.record("twitter", Failure("NotConfigured", "twitter credentials are not configured"))
        publisher.publish.return_value = result
        return publisher

    @pytest.fixture
    def service(self, mock_publisher):
        return PublishService(publisher=mock_publisher)

    @pytest.mark.asyncio
    async def test_publish_images_returns_envelope(self, service, mock_publisher):
        dto = PublishPostDTO.model_validate(
            {"imageUrls": ["https://example.com/a.jpg"], "caption": " Great deal ", "title": "  "}
        )

        envelope = await service.publish_images(dto)

        assert envelope["success"] is True
        assert envelope["results"]["facebook"] == {"id": "post_1"}
        assert envelope["results"]["twitter"]["error"]["kind"] == "NotConfigured"

        request = mock_publisher.publish.call_args.args[0]
        assert request.media_kind == MediaKind.IMAGE
        assert request.caption == "Great deal"
        assert request.title is None

    @pytest.mark.asyncio
    async def test_publish_video_uses_single_url_field(self, service, mock_publisher):
        dto = PublishPostDTO.model_validate(
            {"videoUrl": "https://example.com/clip.mp4", "caption": "Walkaround", "targets": ["facebook"]}
        )

        await service.publish_video(dto)

        request = mock_publisher.publish.call_args.args[0]
        assert request.media_kind == MediaKind.VIDEO
        assert request.media_urls == ("https://example.com/clip.mp4",)
        assert request.targets == ("facebook",)

    @pytest.mark.asyncio
    async def test_invalid_request_never_reaches_publisher(self, service, mock_publisher):
        dto = PublishPostDTO.model_validate({"imageUrls": [], "caption": "Hello"})

        with pytest.raises(PublishValidationError):
            await service.publish_images(dto)

        mock_publisher.publish.assert_not_called()
