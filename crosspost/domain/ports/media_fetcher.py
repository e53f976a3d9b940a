"""
Outbound port for retrieving remote media.

Targets that accept a URL by reference use MediaReference directly;
targets that need the binary pull a MediaBuffer through a MediaFetcher.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..errors import MediaFetchError


class MediaKind(str, Enum):
    """Kind of media carried by a post."""

    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class MediaReference:
    """Remote media the platform fetches itself."""

    url: str


@dataclass(frozen=True)
class MediaBuffer:
    """Media bytes already pulled by the fetcher."""

    url: str
    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


MediaAsset = MediaReference | MediaBuffer


@dataclass(frozen=True)
class FetchFailure:
    """A media URL that could not be retrieved."""

    url: str
    reason: str
    status_code: int | None = None


class MediaFetcher(ABC):
    """
    Outbound port for fetching media.

    fetch() never raises for transport or status errors: dead links are
    expected in multi-media lists and are skipped by the caller.
    """

    @abstractmethod
    async def fetch(self, url: str) -> MediaBuffer | FetchFailure:
        """
        Download a media URL into memory.

        Args:
            url: Remote media URL

        Returns:
            MediaBuffer with the bytes, or FetchFailure describing the error
        """
        ...

    @abstractmethod
    async def fetch_to_file(self, url: str, directory: Path | None = None) -> Path | FetchFailure:
        """Download a media URL into a temporary file (alternate sink)."""
        ...

    async def fetch_required(self, url: str) -> MediaBuffer:
        """Fetch a URL whose failure is fatal to the calling target."""
        result = await self.fetch(url)
        if isinstance(result, FetchFailure):
            raise MediaFetchError(result.url, result.reason)
        return result
