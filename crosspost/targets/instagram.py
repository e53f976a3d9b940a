import asyncio
from typing import Any

import httpx
import structlog

from ..domain.credentials import InstagramCredentials
from ..domain.errors import PlatformError, StalledUpload
from ..domain.ports import MediaFetcher, PublishRequest, TargetAdapter
from ..protocols import StagedMediaProtocol, check_response, created_id
from .facebook import GRAPH_URL

logger = structlog.get_logger()


class InstagramContainers:
    """
    Container/publish two-step shared by feed, carousel, reels and stories.

    Every Instagram post is first created as a media container, then
    published by creation id.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        credentials: InstagramCredentials,
        target: str = "instagram",
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._credentials = credentials
        self.target = target

    async def create(self, payload: dict[str, Any]) -> str:
        response = await self._client.post(
            f"{self._base_url}/{self._credentials.ig_user_id}/media",
            json={**payload, "access_token": self._credentials.access_token},
        )
        return created_id(response, self.target)

    async def publish(self, creation_id: str) -> dict[str, Any]:
        response = await self._client.post(
            f"{self._base_url}/{self._credentials.ig_user_id}/media_publish",
            json={
                "creation_id": creation_id,
                "access_token": self._credentials.access_token,
            },
        )
        data = check_response(response, self.target)
        logger.info("Instagram media published", target=self.target, post_id=data.get("id"))
        return data

    async def wait_until_ready(
        self,
        creation_id: str,
        poll_interval: float,
        max_polls: int,
    ) -> None:
        """Poll a container until the platform has finished processing it."""
        for _ in range(max_polls):
            response = await self._client.get(
                f"{self._base_url}/{creation_id}",
                params={
                    "fields": "status_code",
                    "access_token": self._credentials.access_token,
                },
            )
            data = check_response(response, self.target)
            status_code = data.get("status_code")
            if status_code in (None, "FINISHED", "PUBLISHED"):
                return
            if status_code in ("ERROR", "EXPIRED"):
                raise PlatformError(self.target, response.status_code, data)
            await asyncio.sleep(poll_interval)

        logger.warning(
            "Instagram container left unpublished",
            target=self.target,
            creation_id=creation_id,
        )
        raise StalledUpload(
            f"{self.target} container not ready after {max_polls} polls",
            detail={"creation_id": creation_id},
        )


class InstagramCarousel(StagedMediaProtocol):
    """Carousel items staged as children, then one carousel container."""

    target = "instagram"

    def __init__(self, containers: InstagramContainers, caption: str) -> None:
        self._containers = containers
        self._caption = caption

    async def stage(self, url: str) -> str:
        return await self._containers.create({"image_url": url, "is_carousel_item": True})

    async def finalize(self, media_ids: list[str]) -> dict[str, Any]:
        carousel_id = await self._containers.create(
            {
                "media_type": "CAROUSEL",
                "children": media_ids,
                "caption": self._caption,
            }
        )
        return await self._containers.publish(carousel_id)


class InstagramAdapter(TargetAdapter):
    """Instagram Graph API adapter for feed posts, carousels and reels."""

    def __init__(
        self,
        credentials: InstagramCredentials,
        graph_version: str = "v23.0",
        poll_interval: float = 5.0,
        max_polls: int = 24,
    ) -> None:
        self._credentials = credentials
        self._base_url = f"{GRAPH_URL}/{graph_version}"
        self._poll_interval = poll_interval
        self._max_polls = max_polls

    @property
    def target_id(self) -> str:
        return "instagram"

    @property
    def is_configured(self) -> bool:
        return self._credentials.is_configured

    async def publish_image(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        containers = InstagramContainers(client, self._base_url, self._credentials)
        if len(request.media_urls) == 1:
            creation_id = await containers.create(
                {"image_url": request.primary_url, "caption": request.text}
            )
            return await containers.publish(creation_id)

        return await InstagramCarousel(containers, request.text).run(request.media_urls)

    async def publish_video(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        """Reel from the first video URL, passed by reference."""
        containers = InstagramContainers(client, self._base_url, self._credentials)
        creation_id = await containers.create(
            {
                "video_url": request.primary_url,
                "media_type": "REELS",
                "caption": request.text,
            }
        )
        await containers.wait_until_ready(creation_id, self._poll_interval, self._max_polls)
        return await containers.publish(creation_id)
