import httpx
import pytest

from crosspost.domain.errors import MediaFetchError, PlatformError
from crosspost.domain.ports import MediaBuffer, MediaKind, PublishRequest
from crosspost.protocols.register_upload import upload_content_type
from crosspost.targets import LinkedInAdapter
from tests.conftest import RecordingTransport, StubFetcher, body

UPLOAD_URL = "https://api.linkedin.com/mediaUpload/C4D22AQ/feedshare-uploadedImage/0"
ASSET = "urn:li:digitalmediaAsset:C4D22AQ"


def linkedin_handler(post_id_in_header: bool = False, upload_status: int = 201):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v2/assets":
            return httpx.Response(
                200,
                json={
                    "value": {
                        "uploadMechanism": {
                            "com.linkedin.digitalmedia.uploading.MediaUploadHttpRequest": {
                                "uploadUrl": UPLOAD_URL,
                            }
                        },
                        "asset": ASSET,
                    }
                },
            )
        if request.method == "PUT":
            return httpx.Response(upload_status)
        if post_id_in_header:
            return httpx.Response(201, headers={"x-restli-id": "urn:li:share:123"})
        return httpx.Response(201, json={"id": "urn:li:share:456"})

    return handler


class TestLinkedInAdapter:
    @pytest.fixture
    def adapter(self, li_credentials):
        return LinkedInAdapter(credentials=li_credentials)

    @pytest.fixture
    def fetcher(self):
        return StubFetcher(
            {"https://example.com/a.jpg": b"\xff\xd8jpeg", "https://example.com/clip.mp4": b"mp4"},
            content_type="image/png",
        )

    @pytest.mark.asyncio
    async def test_register_upload_then_share(self, adapter, fetcher):
        transport = RecordingTransport(linkedin_handler())
        request = PublishRequest(
            caption="Great deal",
            media_urls=("https://example.com/a.jpg", "https://example.com/b.jpg"),
            title="Peugeot 208",
        )

        async with httpx.AsyncClient(transport=transport) as client:
            result = await adapter.publish(client, request, fetcher)

        assert result == {"id": "urn:li:share:456"}
        assert [r.method for r in transport.requests] == ["POST", "PUT", "POST"]

        register, upload, share = transport.requests
        assert register.url.params["action"] == "registerUpload"
        assert register.headers["Authorization"] == "Bearer li-token"
        assert register.headers["X-Restli-Protocol-Version"] == "2.0.0"
        assert body(register)["registerUploadRequest"]["recipes"] == [
            "urn:li:digitalmediaRecipe:feedshare-image"
        ]

        assert str(upload.url) == UPLOAD_URL
        assert upload.content == b"\xff\xd8jpeg"
        assert upload.headers["Content-Type"] == "image/png"

        content = body(share)["specificContent"]["com.linkedin.ugc.ShareContent"]
        assert content["shareCommentary"]["text"] == "Peugeot 208\nGreat deal"
        assert content["shareMediaCategory"] == "IMAGE"
        assert content["media"][0]["media"] == ASSET
        assert fetcher.fetched == ["https://example.com/a.jpg"]

    @pytest.mark.asyncio
    async def test_post_id_from_header(self, adapter, fetcher):
        transport = RecordingTransport(linkedin_handler(post_id_in_header=True))
        request = PublishRequest(caption="Hello", media_urls=("https://example.com/a.jpg",))

        async with httpx.AsyncClient(transport=transport) as client:
            result = await adapter.publish(client, request, fetcher)

        assert result["id"] == "urn:li:share:123"

    @pytest.mark.asyncio
    async def test_video_uses_video_recipe(self, adapter, fetcher):
        transport = RecordingTransport(linkedin_handler())
        request = PublishRequest(
            caption="Walkaround",
            media_urls=("https://example.com/clip.mp4",),
            media_kind=MediaKind.VIDEO,
        )

        async with httpx.AsyncClient(transport=transport) as client:
            await adapter.publish(client, request, fetcher)

        register, upload, share = transport.requests
        assert body(register)["registerUploadRequest"]["recipes"] == [
            "urn:li:digitalmediaRecipe:feedshare-video"
        ]
        # image/png from the fetcher does not match a video upload
        assert upload.headers["Content-Type"] == "video/mp4"
        assert body(share)["specificContent"]["com.linkedin.ugc.ShareContent"]["shareMediaCategory"] == "VIDEO"

    @pytest.mark.asyncio
    async def test_fetch_failure_stops_before_share(self, adapter):
        transport = RecordingTransport(linkedin_handler())
        request = PublishRequest(caption="Hello", media_urls=("https://example.com/gone.jpg",))

        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(MediaFetchError):
                await adapter.publish(client, request, StubFetcher())

        assert transport.paths() == ["/v2/assets"]

    @pytest.mark.asyncio
    async def test_upload_rejected(self, adapter, fetcher):
        transport = RecordingTransport(linkedin_handler(upload_status=403))
        request = PublishRequest(caption="Hello", media_urls=("https://example.com/a.jpg",))

        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(PlatformError) as exc_info:
                await adapter.publish(client, request, fetcher)

        assert exc_info.value.status_code == 403
        assert [r.method for r in transport.requests] == ["POST", "PUT"]


class TestUploadContentType:
    def test_keeps_matching_fetched_type(self):
        buffer = MediaBuffer(url="u", content=b"", content_type="image/webp; charset=binary")
        assert upload_content_type(buffer, MediaKind.IMAGE) == "image/webp"

    def test_defaults_when_missing(self):
        buffer = MediaBuffer(url="u", content=b"")
        assert upload_content_type(buffer, MediaKind.IMAGE) == "image/jpeg"
        assert upload_content_type(buffer, MediaKind.VIDEO) == "video/mp4"
