from typing import Any

import httpx

from ..domain.credentials import InstagramCredentials
from ..domain.ports import MediaFetcher, PublishRequest, TargetAdapter
from .facebook import GRAPH_URL
from .instagram import InstagramContainers


class InstagramStoryAdapter(TargetAdapter):
    """Instagram story from the first image, after the feed post succeeded."""

    depends_on = "instagram"

    def __init__(self, credentials: InstagramCredentials, graph_version: str = "v23.0") -> None:
        self._credentials = credentials
        self._base_url = f"{GRAPH_URL}/{graph_version}"

    @property
    def target_id(self) -> str:
        return "instagram_story"

    @property
    def is_configured(self) -> bool:
        return self._credentials.is_configured

    async def publish_image(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        containers = InstagramContainers(
            client, self._base_url, self._credentials, target=self.target_id
        )
        creation_id = await containers.create(
            {"image_url": request.primary_url, "media_type": "STORY"}
        )
        return await containers.publish(creation_id)
