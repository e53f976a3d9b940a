"""
Outbound port for a single publishing target.

Each platform implements its own publish state machine behind this
interface. The coordinator only ever calls publish(); dispatch on the
media kind and the credentials check live here so no platform branching
leaks into the coordinator.
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..errors import TargetNotConfigured, UnsupportedMedia
from .media_fetcher import MediaFetcher, MediaKind
from .publisher import PublishRequest


class TargetAdapter(ABC):
    """
    Publish protocol for one target.

    Implementations raise PublishError subclasses (or let httpx errors
    escape) on failure and return the platform's response on success.
    """

    #: Target this adapter must wait for, if any
    depends_on: str | None = None

    @property
    @abstractmethod
    def target_id(self) -> str:
        """Return the target identifier this adapter handles."""
        ...

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the credentials needed by this target are present."""
        ...

    async def publish(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        """Run the protocol matching the request's media kind."""
        if not self.is_configured:
            raise TargetNotConfigured(f"{self.target_id} credentials are not configured")

        if request.media_kind == MediaKind.VIDEO:
            return await self.publish_video(client, request, fetcher)
        return await self.publish_image(client, request, fetcher)

    @abstractmethod
    async def publish_image(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        """Publish an image post (one or more images)."""
        ...

    async def publish_video(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        """Publish a video post from the request's first URL."""
        raise UnsupportedMedia(f"{self.target_id} does not support video posts")
