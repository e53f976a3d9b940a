"""Single-call protocol: the media is passed by URL and published in one request."""

from typing import Any

import httpx
import structlog

from ..domain.ports import MediaReference
from .base import check_response

logger = structlog.get_logger()


class DirectReferenceProtocol:
    """
    POST a create-post payload that references remote media by URL.

    The platform fetches the media itself; url_field names the payload key
    it expects the URL under.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        target: str,
        endpoint: str,
        url_field: str = "url",
    ) -> None:
        self._client = client
        self._target = target
        self._endpoint = endpoint
        self._url_field = url_field

    async def publish(self, media: MediaReference, fields: dict[str, Any]) -> dict[str, Any]:
        response = await self._client.post(
            self._endpoint,
            json={self._url_field: media.url, **fields},
        )
        data = check_response(response, self._target)
        logger.info("Published by reference", target=self._target, post_id=data.get("id"))
        return data
