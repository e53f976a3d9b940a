import json
from pathlib import Path

import httpx
import pytest

from crosspost.domain.credentials import (
    InstagramCredentials,
    LinkedInCredentials,
    MetaPageCredentials,
    TwitterCredentials,
)
from crosspost.domain.ports import FetchFailure, MediaBuffer, MediaFetcher


class StubFetcher(MediaFetcher):
    """In-memory fetcher: known URLs return bytes, anything else fails."""

    def __init__(self, media: dict[str, bytes] | None = None, content_type: str | None = None):
        self.media = media or {}
        self.content_type = content_type
        self.fetched: list[str] = []

    async def fetch(self, url: str) -> MediaBuffer | FetchFailure:
        self.fetched.append(url)
        if url not in self.media:
            return FetchFailure(url=url, reason="HTTP 404", status_code=404)
        return MediaBuffer(url=url, content=self.media[url], content_type=self.content_type)

    async def fetch_to_file(self, url: str, directory: Path | None = None) -> Path | FetchFailure:
        raise NotImplementedError


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


def body(request: httpx.Request) -> dict:
    return json.loads(request.content)


@pytest.fixture
def fb_credentials() -> MetaPageCredentials:
    return MetaPageCredentials(page_id="page123", access_token="fb-token")


@pytest.fixture
def ig_credentials() -> InstagramCredentials:
    return InstagramCredentials(ig_user_id="ig123", access_token="fb-token")


@pytest.fixture
def li_credentials() -> LinkedInCredentials:
    return LinkedInCredentials(author_urn="urn:li:organization:42", access_token="li-token")


@pytest.fixture
def tw_credentials() -> TwitterCredentials:
    return TwitterCredentials(
        api_key="key",
        api_secret="secret",
        access_token="token",
        access_secret="token-secret",
    )
