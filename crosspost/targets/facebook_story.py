from typing import Any

import httpx

from ..domain.credentials import MetaPageCredentials
from ..domain.ports import MediaFetcher, MediaReference, PublishRequest, TargetAdapter
from ..protocols import DirectReferenceProtocol
from .facebook import GRAPH_URL


class FacebookStoryAdapter(TargetAdapter):
    """Page story from the first image; runs only after the feed post succeeded."""

    depends_on = "facebook"

    def __init__(self, credentials: MetaPageCredentials, graph_version: str = "v23.0") -> None:
        self._credentials = credentials
        self._base_url = f"{GRAPH_URL}/{graph_version}"

    @property
    def target_id(self) -> str:
        return "facebook_story"

    @property
    def is_configured(self) -> bool:
        return self._credentials.is_configured

    async def publish_image(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        protocol = DirectReferenceProtocol(
            client,
            self.target_id,
            f"{self._base_url}/{self._credentials.page_id}/stories",
            url_field="file_url",
        )
        return await protocol.publish(
            MediaReference(request.primary_url),
            {"access_token": self._credentials.access_token},
        )
