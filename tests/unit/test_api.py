import pytest
from fastapi.testclient import TestClient

from crosspost.application.services import PublishService
from crosspost.domain.credentials import LinkedInCredentials
from crosspost.domain.ports import (
    Failure,
    MessagingSession,
    Publisher,
    PublishRequest,
    PublishResult,
    SendOutcome,
    SessionNotReady,
    SessionState,
    Success,
)
from crosspost.infrastructure.adapters import TargetRegistry
from crosspost.main import create_app
from crosspost.presentation.api.dependencies import (
    get_messaging_session,
    get_publish_service,
    get_registry,
)
from crosspost.targets import FacebookAdapter, LinkedInAdapter


class FakePublisher(Publisher):
    def __init__(self):
        self.requests: list[PublishRequest] = []

    async def publish(self, request: PublishRequest) -> PublishResult:
        self.requests.append(request)
        result = PublishResult()
        result.record("facebook", Success({"id": "post_1"}))
        result.record("linkedin", Failure("FetchFailure", {"url": request.primary_url, "reason": "HTTP 404"}))
        return result


class FakeSession(MessagingSession):
    def __init__(self, state=SessionState.READY, outcome=None):
        self._state = state
        self.outcome = outcome or SendOutcome(success=True, message_id="wamid.1")
        self.sent: list[tuple] = []

    @property
    def state(self) -> SessionState:
        return self._state

    async def connect(self) -> SessionState:
        return self._state

    async def send(self, destination, content, media_url=None) -> SendOutcome:
        if self._state != SessionState.READY:
            raise SessionNotReady(f"WhatsApp session is {self._state.value}")
        self.sent.append((destination, content, media_url))
        return self.outcome

    async def close(self) -> None:
        self._state = SessionState.CLOSED


@pytest.fixture
def publisher():
    return FakePublisher()


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(publisher, session, fb_credentials):
    registry = TargetRegistry(
        [
            FacebookAdapter(fb_credentials),
            LinkedInAdapter(LinkedInCredentials(author_urn="", access_token="")),
        ]
    )
    app = create_app()
    app.dependency_overrides[get_publish_service] = lambda: PublishService(publisher)
    app.dependency_overrides[get_messaging_session] = lambda: session
    app.dependency_overrides[get_registry] = lambda: registry
    return TestClient(app)


class TestPublishEndpoints:
    def test_publish_images(self, client, publisher):
        response = client.post(
            "/api/v1/posts/images",
            json={
                "imageUrls": ["https://example.com/a.jpg", "https://example.com/b.jpg"],
                "caption": "Great deal",
                "title": "Peugeot 208",
                "socials": ["facebook", "linkedin"],
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "results": {
                "facebook": {"id": "post_1"},
                "linkedin": {
                    "error": {
                        "kind": "FetchFailure",
                        "detail": {"url": "https://example.com/a.jpg", "reason": "HTTP 404"},
                    }
                },
            },
        }
        request = publisher.requests[0]
        assert request.media_urls == ("https://example.com/a.jpg", "https://example.com/b.jpg")
        assert request.targets == ("facebook", "linkedin")
        assert request.title == "Peugeot 208"

    def test_publish_video(self, client, publisher):
        response = client.post(
            "/api/v1/posts/videos",
            json={"videoUrl": "https://example.com/clip.mp4", "caption": "Walkaround"},
        )

        assert response.status_code == 200
        request = publisher.requests[0]
        assert request.media_kind.value == "video"
        assert request.media_urls == ("https://example.com/clip.mp4",)
        assert request.targets == ()

    def test_missing_caption_rejected(self, client, publisher):
        response = client.post(
            "/api/v1/posts/images",
            json={"imageUrls": ["https://example.com/a.jpg"]},
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "caption is required"}
        assert publisher.requests == []

    def test_missing_media_rejected(self, client, publisher):
        response = client.post("/api/v1/posts/videos", json={"caption": "Hello"})

        assert response.status_code == 400
        assert response.json()["message"] == "videoUrls (array of URLs) and caption are required"
        assert publisher.requests == []

    def test_single_media_url_string_accepted(self, client, publisher):
        response = client.post(
            "/api/v1/posts/images",
            json={"mediaUrls": "https://example.com/a.jpg", "caption": "Hi", "targets": "facebook"},
        )

        assert response.status_code == 200
        request = publisher.requests[0]
        assert request.media_urls == ("https://example.com/a.jpg",)
        assert request.targets == ("facebook",)

    def test_wrong_typed_field_uses_failure_envelope(self, client, publisher):
        response = client.post(
            "/api/v1/posts/images",
            json={"mediaUrls": ["https://example.com/a.jpg"], "caption": {"text": "Hi"}},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["message"].startswith("caption")
        assert "detail" not in data
        assert publisher.requests == []

    def test_correlation_id_echoed(self, client):
        response = client.post(
            "/api/v1/posts/images",
            json={"imageUrls": ["https://example.com/a.jpg"], "caption": "Hi"},
            headers={"X-Request-ID": "req-42"},
        )

        assert response.headers["X-Request-ID"] == "req-42"


class TestMessagingEndpoint:
    def test_send(self, client, session):
        response = client.post(
            "/api/v1/messaging/send",
            json={"destination": "351900000001", "content": "Hello", "mediaUrl": "https://example.com/a.jpg"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "messageId": "wamid.1"}
        assert session.sent == [("351900000001", "Hello", "https://example.com/a.jpg")]

    def test_session_not_ready(self, client, session):
        session._state = SessionState.DISCONNECTED

        response = client.post(
            "/api/v1/messaging/send",
            json={"destination": "351900000001", "content": "Hello"},
        )

        assert response.status_code == 503

    def test_delivery_failure(self, client, session):
        session.outcome = SendOutcome(success=False, error="WhatsApp API error: 400")

        response = client.post(
            "/api/v1/messaging/send",
            json={"destination": "351900000001", "content": "Hello"},
        )

        assert response.status_code == 502
        assert response.json()["detail"] == "WhatsApp API error: 400"


class TestHealthEndpoints:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_readiness(self, client):
        response = client.get("/health/ready")

        data = response.json()
        assert data["status"] == "ready"
        assert data["checks"]["targets"] == {
            "facebook": {"configured": True},
            "linkedin": {"configured": False},
        }
        assert data["checks"]["messaging"] == {"status": "healthy", "state": "ready"}
