"""
HTTP media fetcher.

Pulls remote images and videos into memory for targets that need a
binary upload. Dead links are reported as FetchFailure, never raised.
"""

import mimetypes
import tempfile
from pathlib import Path

import httpx
import structlog

from ..domain.ports import FetchFailure, MediaBuffer, MediaFetcher

logger = structlog.get_logger()


class HttpMediaFetcher(MediaFetcher):
    """MediaFetcher backed by a timed httpx GET."""

    def __init__(
        self,
        timeout: float = 45.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, url: str) -> MediaBuffer | FetchFailure:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()

        except httpx.HTTPStatusError as e:
            logger.warning(
                "Skipping invalid media URL",
                url=url,
                status_code=e.response.status_code,
            )
            return FetchFailure(
                url=url,
                reason=f"HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            )

        except httpx.HTTPError as e:
            logger.warning("Skipping invalid media URL", url=url, error=str(e))
            return FetchFailure(url=url, reason=str(e) or type(e).__name__)

        logger.debug("Media fetched", url=url, size=len(response.content))
        return MediaBuffer(
            url=url,
            content=response.content,
            content_type=response.headers.get("content-type"),
        )

    async def fetch_to_file(self, url: str, directory: Path | None = None) -> Path | FetchFailure:
        """Download into a named temporary file; the caller removes it."""
        result = await self.fetch(url)
        if isinstance(result, FetchFailure):
            return result

        suffix = Path(httpx.URL(url).path).suffix or _guess_suffix(result.content_type)
        with tempfile.NamedTemporaryFile(
            dir=directory,
            prefix="media_",
            suffix=suffix,
            delete=False,
        ) as handle:
            handle.write(result.content)
        return Path(handle.name)


def _guess_suffix(content_type: str | None) -> str:
    if not content_type:
        return ".bin"
    return mimetypes.guess_extension(content_type.split(";")[0].strip()) or ".bin"
