"""
Register-upload-then-post protocol for asset-registration platforms.

1. register: declare the media kind and author, receive an upload URL and
   a persistent asset id
2. upload: fetch the source media and PUT the bytes to the upload URL
3. create_record: create the content record referencing the asset
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import structlog

from ..domain.ports import MediaBuffer, MediaFetcher, MediaKind

logger = structlog.get_logger()

DEFAULT_CONTENT_TYPES = {
    MediaKind.IMAGE: "image/jpeg",
    MediaKind.VIDEO: "video/mp4",
}


@dataclass(frozen=True)
class UploadSlot:
    """One-time upload URL plus the asset it will populate."""

    upload_url: str
    asset_id: str


def upload_content_type(buffer: MediaBuffer, kind: MediaKind) -> str:
    """Content type for the PUT, keeping the fetched type when it matches the kind."""
    fetched = (buffer.content_type or "").split(";")[0].strip().lower()
    if fetched.startswith(f"{kind.value}/"):
        return fetched
    return DEFAULT_CONTENT_TYPES[kind]


class RegisterUploadProtocol(ABC):
    target: str = ""

    @abstractmethod
    async def register(self, kind: MediaKind) -> UploadSlot:
        ...

    @abstractmethod
    async def upload(self, slot: UploadSlot, buffer: MediaBuffer, kind: MediaKind) -> None:
        ...

    @abstractmethod
    async def create_record(self, asset_id: str, kind: MediaKind) -> dict[str, Any]:
        ...

    async def run(self, url: str, kind: MediaKind, fetcher: MediaFetcher) -> dict[str, Any]:
        slot = await self.register(kind)
        logger.info("Upload registered", target=self.target, asset_id=slot.asset_id)

        buffer = await fetcher.fetch_required(url)
        await self.upload(slot, buffer, kind)
        logger.info(
            "Asset uploaded",
            target=self.target,
            asset_id=slot.asset_id,
            size=buffer.size,
        )

        return await self.create_record(slot.asset_id, kind)
