from typing import Any

import httpx
import structlog

from ..domain.credentials import MetaPageCredentials
from ..domain.ports import MediaFetcher, MediaReference, PublishRequest, TargetAdapter
from ..protocols import (
    ChunkedUploadSession,
    DirectReferenceProtocol,
    ResumableChunkedUpload,
    StagedMediaProtocol,
    check_response,
    created_id,
)
from ..protocols.chunked_upload import DEFAULT_CHUNK_SIZE

logger = structlog.get_logger()

GRAPH_URL = "https://graph.facebook.com"


class FacebookPhotoSet(StagedMediaProtocol):
    """Unpublished page photos attached to a single feed post."""

    target = "facebook"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        credentials: MetaPageCredentials,
        message: str,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._credentials = credentials
        self._message = message

    async def stage(self, url: str) -> str:
        response = await self._client.post(
            f"{self._base_url}/{self._credentials.page_id}/photos",
            json={
                "url": url,
                "published": False,
                "access_token": self._credentials.access_token,
            },
        )
        return created_id(response, self.target)

    async def finalize(self, media_ids: list[str]) -> dict[str, Any]:
        response = await self._client.post(
            f"{self._base_url}/{self._credentials.page_id}/feed",
            json={
                "message": self._message,
                "attached_media": [{"media_fbid": media_id} for media_id in media_ids],
                "access_token": self._credentials.access_token,
            },
        )
        data = check_response(response, self.target)
        logger.info("Facebook post created", post_id=data.get("id"), photos=len(media_ids))
        return data


class FacebookVideoUpload(ResumableChunkedUpload):
    """Page video upload through start/transfer/finish phases of /{page}/videos."""

    target = "facebook"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        credentials: MetaPageCredentials,
        request: PublishRequest,
        upload_timeout: float = 120.0,
        **guards: Any,
    ) -> None:
        super().__init__(**guards)
        self._client = client
        self._url = f"{base_url}/{credentials.page_id}/videos"
        self._access_token = credentials.access_token
        self._request = request
        self._upload_timeout = upload_timeout

    async def start(self, total_size: int) -> ChunkedUploadSession:
        response = await self._client.post(
            self._url,
            params={
                "upload_phase": "start",
                "access_token": self._access_token,
                "file_size": total_size,
            },
        )
        data = check_response(response, self.target)
        return ChunkedUploadSession(
            session_id=str(data["upload_session_id"]),
            object_id=data.get("video_id"),
            cursor=int(data["start_offset"]),
            end_offset=int(data["end_offset"]),
        )

    async def transfer(self, session: ChunkedUploadSession, chunk: bytes) -> None:
        response = await self._client.post(
            self._url,
            params=self._transfer_params(session),
            files={"video_file_chunk": ("chunk.mp4", chunk, "application/octet-stream")},
            timeout=self._upload_timeout,
        )
        check_response(response, self.target)

    async def status(self, session: ChunkedUploadSession) -> tuple[int, int]:
        response = await self._client.post(self._url, params=self._transfer_params(session))
        data = check_response(response, self.target)
        return int(data["start_offset"]), int(data["end_offset"])

    async def finish(self, session: ChunkedUploadSession) -> dict[str, Any]:
        params = {
            "upload_phase": "finish",
            "upload_session_id": session.session_id,
            "access_token": self._access_token,
            "description": self._request.text,
        }
        if self._request.title:
            params["title"] = self._request.title

        response = await self._client.post(self._url, params=params)
        data = check_response(response, self.target)
        logger.info("Facebook video published", video_id=session.object_id)
        return {"video_id": session.object_id, **data}

    def _transfer_params(self, session: ChunkedUploadSession) -> dict[str, Any]:
        return {
            "upload_phase": "transfer",
            "upload_session_id": session.session_id,
            "start_offset": session.cursor,
            "access_token": self._access_token,
        }


class FacebookAdapter(TargetAdapter):
    """Facebook Graph API adapter for Page posts."""

    def __init__(
        self,
        credentials: MetaPageCredentials,
        graph_version: str = "v23.0",
        upload_timeout: float = 120.0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_iterations: int = 1000,
        max_stalled_polls: int = 3,
        max_duration: float | None = 600.0,
    ) -> None:
        self._credentials = credentials
        self._base_url = f"{GRAPH_URL}/{graph_version}"
        self._upload_timeout = upload_timeout
        self._upload_guards = {
            "chunk_size": chunk_size,
            "max_iterations": max_iterations,
            "max_stalled_polls": max_stalled_polls,
            "max_duration": max_duration,
        }

    @property
    def target_id(self) -> str:
        return "facebook"

    @property
    def is_configured(self) -> bool:
        return self._credentials.is_configured

    async def publish_image(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        """Single photo by reference, or several staged photos in one feed post."""
        if len(request.media_urls) == 1:
            protocol = DirectReferenceProtocol(
                client,
                self.target_id,
                f"{self._base_url}/{self._credentials.page_id}/photos",
            )
            return await protocol.publish(
                MediaReference(request.primary_url),
                {
                    "published": True,
                    "message": request.text,
                    "access_token": self._credentials.access_token,
                },
            )

        photo_set = FacebookPhotoSet(client, self._base_url, self._credentials, request.text)
        return await photo_set.run(request.media_urls)

    async def publish_video(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        """Chunked upload of the first video URL."""
        buffer = await fetcher.fetch_required(request.primary_url)
        upload = FacebookVideoUpload(
            client,
            self._base_url,
            self._credentials,
            request,
            upload_timeout=self._upload_timeout,
            **self._upload_guards,
        )
        return await upload.run(buffer.content)
