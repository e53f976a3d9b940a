from typing import Any

import httpx
import structlog

from ..domain.credentials import LinkedInCredentials
from ..domain.ports import MediaBuffer, MediaFetcher, MediaKind, PublishRequest, TargetAdapter
from ..protocols import RegisterUploadProtocol, UploadSlot, check_response
from ..protocols.register_upload import upload_content_type

logger = structlog.get_logger()

BASE_URL = "https://api.linkedin.com/v2"
UPLOAD_MECHANISM = "com.linkedin.digitalmedia.uploading.MediaUploadHttpRequest"
RECIPES = {
    MediaKind.IMAGE: "urn:li:digitalmediaRecipe:feedshare-image",
    MediaKind.VIDEO: "urn:li:digitalmediaRecipe:feedshare-video",
}


class LinkedInAssetUpload(RegisterUploadProtocol):
    """registerUpload → PUT binary → ugcPosts share referencing the asset."""

    target = "linkedin"

    def __init__(
        self,
        client: httpx.AsyncClient,
        credentials: LinkedInCredentials,
        request: PublishRequest,
        upload_timeout: float = 120.0,
    ) -> None:
        self._client = client
        self._credentials = credentials
        self._request = request
        self._upload_timeout = upload_timeout

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._credentials.access_token}",
            "X-Restli-Protocol-Version": "2.0.0",
        }

    async def register(self, kind: MediaKind) -> UploadSlot:
        response = await self._client.post(
            f"{BASE_URL}/assets",
            params={"action": "registerUpload"},
            headers=self._headers,
            json={
                "registerUploadRequest": {
                    "owner": self._credentials.author_urn,
                    "recipes": [RECIPES[kind]],
                    "serviceRelationships": [
                        {
                            "identifier": "urn:li:userGeneratedContent",
                            "relationshipType": "OWNER",
                        }
                    ],
                }
            },
        )
        value = check_response(response, self.target)["value"]
        return UploadSlot(
            upload_url=value["uploadMechanism"][UPLOAD_MECHANISM]["uploadUrl"],
            asset_id=value["asset"],
        )

    async def upload(self, slot: UploadSlot, buffer: MediaBuffer, kind: MediaKind) -> None:
        response = await self._client.put(
            slot.upload_url,
            content=buffer.content,
            headers={
                "Authorization": f"Bearer {self._credentials.access_token}",
                "Content-Type": upload_content_type(buffer, kind),
            },
            timeout=self._upload_timeout,
        )
        check_response(response, self.target)

    async def create_record(self, asset_id: str, kind: MediaKind) -> dict[str, Any]:
        share_content = {
            "author": self._credentials.author_urn,
            "lifecycleState": "PUBLISHED",
            "specificContent": {
                "com.linkedin.ugc.ShareContent": {
                    "shareCommentary": {"text": self._request.text},
                    "shareMediaCategory": kind.name,
                    "media": [
                        {
                            "status": "READY",
                            "description": {"text": self._request.caption},
                            "media": asset_id,
                            "title": {"text": self._request.title or ""},
                        }
                    ],
                }
            },
            "visibility": {"com.linkedin.ugc.MemberNetworkVisibility": "PUBLIC"},
        }

        response = await self._client.post(
            f"{BASE_URL}/ugcPosts",
            headers=self._headers,
            json=share_content,
        )
        data = check_response(response, self.target)
        if not data.get("id") and response.headers.get("x-restli-id"):
            data["id"] = response.headers["x-restli-id"]

        logger.info("LinkedIn post created", post_id=data.get("id"), asset=asset_id)
        return data


class LinkedInAdapter(TargetAdapter):
    """LinkedIn API adapter; posts the first media item of the request."""

    def __init__(self, credentials: LinkedInCredentials, upload_timeout: float = 120.0) -> None:
        self._credentials = credentials
        self._upload_timeout = upload_timeout

    @property
    def target_id(self) -> str:
        return "linkedin"

    @property
    def is_configured(self) -> bool:
        return self._credentials.is_configured

    async def publish_image(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        upload = LinkedInAssetUpload(client, self._credentials, request, self._upload_timeout)
        return await upload.run(request.primary_url, MediaKind.IMAGE, fetcher)

    async def publish_video(
        self,
        client: httpx.AsyncClient,
        request: PublishRequest,
        fetcher: MediaFetcher,
    ) -> dict[str, Any]:
        upload = LinkedInAssetUpload(client, self._credentials, request, self._upload_timeout)
        return await upload.run(request.primary_url, MediaKind.VIDEO, fetcher)
