"""
Twitter (X) adapter.

Media is uploaded through the v1.1 upload endpoint, then referenced by id
from a v2 tweet. Images use the simple upload (up to four per tweet);
video uses the INIT/APPEND/FINALIZE command sequence and waits for the
platform to finish processing before tweeting.

Requests carry an OAuth 1.0a user-context signature built with authlib.
Command parameters travel in the query string so the signature covers
them; JSON and multipart bodies are not part of the signature.
"""

import asyncio
from typing import Any

import httpx
import structlog
from authlib.oauth1 import ClientAuth

from ..domain.credentials import TwitterCredentials
from ..domain.errors import MediaFetchError, PlatformError, StalledUpload
from ..domain.ports import (
    FetchFailure,
    MediaBuffer,
    MediaFetcher,
    PublishRequest,
    TargetAdapter,
)
from ..protocols import StagedMediaProtocol, check_response, created_id
from ..protocols.chunked_upload import DEFAULT_CHUNK_SIZE

logger = structlog.get_logger()

TWITTER_API_BASE = "https://api.twitter.com/2"
TWITTER_UPLOAD_URL = "https://upload.twitter.com/1.1/media/upload.json"
MAX_IMAGES = 4


class OAuth1Signature(httpx.Auth):
    """httpx auth adding an OAuth 1.0a Authorization header over method, URL and query."""

    def __init__(self, credentials: TwitterCredentials) -> None:
        self._client_auth = ClientAuth(
            client_id=credentials.api_key,
            client_secret=credentials.api_secret,
            token=credentials.access_token,
            token_secret=credentials.access_secret,
        )

    def auth_flow(self, request: httpx.Request):
        _, headers, _ = self._client_auth.sign(request.method, str(request.url), {}, b"")
        request.headers["Authorization"] = headers["Authorization"]
        yield request


class TwitterMedia:
    """Upload calls against the media endpoint."""

    target = "twitter"

    def __init__(
        self,
        client: httpx.AsyncClient,
        auth: httpx.Auth,
        upload_timeout: float = 120.0,
    ) -> None:
        self._client = client
        self._auth = auth
        self._upload_timeout = upload_timeout

    async def upload_image(self, buffer: MediaBuffer) -> str:
        response = await self._client.post(
            TWITTER_UPLOAD_URL,
            files={"media": ("image", buffer.content, buffer.content_type or "image/jpeg")},
            auth=self._auth,
            timeout=self._upload_timeout,
        )
        return created_id(response, self.target, key="media_id_string")

    async def upload_video(
        self,
        buffer: MediaBuffer,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        poll_interval: float = 5.0,
        max_polls: int = 24,
    ) -> str:
        response = await self._client.post(
            TWITTER_UPLOAD_URL,
            params={
                "command": "INIT",
                "total_bytes": str(buffer.size),
                "media_type": "video/mp4",
                "media_category": "tweet_video",
            },
            auth=self._auth,
        )
        media_id = created_id(response, self.target, key="media_id_string")

        for segment_index, offset in enumerate(range(0, buffer.size, chunk_size)):
            response = await self._client.post(
                TWITTER_UPLOAD_URL,
                params={
                    "command": "APPEND",
                    "media_id": media_id,
                    "segment_index": str(segment_index),
                },
                files={"media": ("chunk", buffer.content[offset:offset + chunk_size])},
                auth=self._auth,
                timeout=self._upload_timeout,
            )
            check_response(response, self.target)

        response = await self._client.post(
            TWITTER_UPLOAD_URL,
            params={"command": "FINALIZE", "media_id": media_id},
            auth=self._auth,
        )
        processing = check_response(response, self.target).get("processing_info")

        polls = 0
        while processing and processing.get("state") != "succeeded":
            if processing.get("state") == "failed":
                raise PlatformError(self.target, response.status_code, processing)
            if polls >= max_polls:
                logger.warning("Twitter media left unprocessed", media_id=media_id)
                raise StalledUpload(
                    f"twitter media not processed after {max_polls} polls",
                    detail={"media_id": media_id},
                )
            await asyncio.sleep(processing.get("check_after_secs", poll_interval))
            polls += 1
            response = await self._client.get(
                TWITTER_UPLOAD_URL,
                params={"command": "STATUS", "media_id": media_id},
                auth=self._auth,
            )
            processing = check_response(response, self.target).get("processing_info")

        return media_id

    async def tweet(self, text: str, media_ids: list[str]) -> dict[str, Any]:
        response = await self._client.post(
            f"{TWITTER_API_BASE}/tweets",
            json={"text": text, "media": {"media_ids": media_ids}},
            auth=self._auth,
        )
        data = check_response(response, self.target)
        tweet = data.get("data", data)
        logger.info("Tweet posted", tweet_id=tweet.get("id"), media=len(media_ids))
        return tweet


class TwitterImageTweet(StagedMediaProtocol):
    """Each image fetched and uploaded, then one tweet referencing all of them."""

    target = "twitter"

    def __init__(self, media: TwitterMedia, fetcher: MediaFetcher, text: str) -> None:
        self._media = media
        self._fetcher = fetcher
        self._text = text

    async def stage(self, url: str) -> str:
        buffer = await self._fetcher.fetch(url)
        if isinstance(buffer, FetchFailure):
            raise MediaFetchError(buffer.url, buffer.reason)
        return await self._media.upload_image(buffer)

    async def finalize(self, media_ids: list[str]) -> dict[str, Any]:
        return await self._media.tweet(self._text, media_ids)


class TwitterAdapter(TargetAdapter):
    """Twitter API adapter for image and video tweets."""

    def __init__(
        self,
        credentials: TwitterCredentials,
        upload_timeout: float = 120.0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        poll_interval: float = 5.0,
        max_polls: int = 24,
    ) -> None:
        self._credentials = credentials
        self._upload_timeout = upload_timeout
        self._chunk_size = chunk_size
        self._poll_interval = poll_interval
        self._max_polls = max_polls

    @property
    def target_id(self) -> str:
        return "twitter"

    @property
    def is_configured(self) -> bool:
        return self._credentials.is_configured

    def _media(self, client: httpx.AsyncClient) -> TwitterMedia:
        return TwitterMedia(client, OAuth1Signature(self._credentials), self._upload_timeout)

    async def publish_image(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        media = self._media(client)
        if len(request.media_urls) == 1:
            buffer = await fetcher.fetch_required(request.primary_url)
            media_id = await media.upload_image(buffer)
            return await media.tweet(request.text, [media_id])

        tweet = TwitterImageTweet(media, fetcher, request.text)
        return await tweet.run(request.media_urls[:MAX_IMAGES])

    async def publish_video(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        media = self._media(client)
        buffer = await fetcher.fetch_required(request.primary_url)
        media_id = await media.upload_video(
            buffer,
            chunk_size=self._chunk_size,
            poll_interval=self._poll_interval,
            max_polls=self._max_polls,
        )
        return await media.tweet(request.text, [media_id])
