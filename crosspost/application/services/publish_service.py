"""
Application service for publishing posts.

Turns inbound DTOs into validated publish requests and hands them to the
Publisher port. It depends on abstractions (ports), not concrete
implementations.
"""

from typing import Any

import structlog

from ...domain.ports import MediaKind, Publisher, PublishResult
from ..dtos import PublishPostDTO

logger = structlog.get_logger()


class PublishService:
    """
    Application service that handles post publication.

    Validation errors from the domain request propagate to the caller
    before any target is contacted; per-target failures are already
    contained in the returned PublishResult.
    """

    def __init__(self, publisher: Publisher) -> None:
        self._publisher = publisher

    async def publish_images(self, dto: PublishPostDTO) -> dict[str, Any]:
        result = await self._publish(dto, MediaKind.IMAGE)
        return result.to_envelope()

    async def publish_video(self, dto: PublishPostDTO) -> dict[str, Any]:
        result = await self._publish(dto, MediaKind.VIDEO)
        return result.to_envelope()

    async def _publish(self, dto: PublishPostDTO, media_kind: MediaKind) -> PublishResult:
        request = dto.to_request(media_kind)

        logger.info(
            "Publishing post",
            media_kind=media_kind.value,
            media_count=len(request.media_urls),
            requested_targets=list(request.targets) or "default",
            has_title=bool(request.title),
        )

        result = await self._publisher.publish(request)

        logger.info(
            "Post publication completed",
            total_targets=len(result.outcomes),
            successful=len(result.succeeded),
        )
        return result
