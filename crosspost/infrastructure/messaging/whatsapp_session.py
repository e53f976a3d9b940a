"""
WhatsApp Cloud API messaging session.

The session is an owned handle with an explicit lifecycle:

    DISCONNECTED -> CONNECTING -> READY -> CLOSED
                         |
                         +-> DISCONNECTED (after bounded retries)

connect() verifies the phone number with a bounded number of attempts and
exponential backoff. A send that hits an authentication error drops the
session back to DISCONNECTED; reconnecting is the owner's decision.
"""

import asyncio

import httpx
import structlog

from ...domain.credentials import WhatsAppCredentials
from ...domain.ports import MessagingSession, SendOutcome, SessionNotReady, SessionState
from ..logging import sanitize_for_logging

logger = structlog.get_logger()


class WhatsAppSession(MessagingSession):
    """WhatsApp Business messaging session over the Graph API."""

    BASE_URL = "https://graph.facebook.com/v23.0"

    def __init__(
        self,
        credentials: WhatsAppCredentials,
        max_attempts: int = 5,
        retry_delay: float = 5.0,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._state = SessionState.DISCONNECTED

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._credentials.access_token}"}

    async def connect(self) -> SessionState:
        if self._state == SessionState.CLOSED:
            raise SessionNotReady("Session is closed")
        if self._state == SessionState.READY:
            return self._state
        if not self._credentials.is_configured:
            logger.warning("WhatsApp credentials not configured, session stays disconnected")
            return self._state

        self._state = SessionState.CONNECTING
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

        delay = self._retry_delay
        for attempt in range(1, self._max_attempts + 1):
            try:
                response = await self._client.get(
                    f"{self.BASE_URL}/{self._credentials.phone_number_id}",
                    headers=self._headers,
                )
                response.raise_for_status()
                self._state = SessionState.READY
                logger.info(
                    "WhatsApp session ready",
                    phone_number_id=sanitize_for_logging(self._credentials.phone_number_id),
                    attempt=attempt,
                )
                return self._state

            except httpx.HTTPError as e:
                logger.warning(
                    "WhatsApp connect attempt failed",
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    error=str(e),
                )
                if attempt < self._max_attempts:
                    await asyncio.sleep(delay)
                    delay *= 2

        self._state = SessionState.DISCONNECTED
        logger.error("WhatsApp session could not connect", attempts=self._max_attempts)
        return self._state

    async def send(
        self,
        destination: str,
        content: str,
        media_url: str | None = None,
    ) -> SendOutcome:
        """Send a WhatsApp message."""
        if self._state != SessionState.READY or self._client is None:
            raise SessionNotReady(f"WhatsApp session is {self._state.value}")

        if media_url:
            payload = {
                "messaging_product": "whatsapp",
                "to": destination,
                "type": "image",
                "image": {"link": media_url, "caption": content},
            }
        else:
            payload = {
                "messaging_product": "whatsapp",
                "to": destination,
                "type": "text",
                "text": {"body": content},
            }

        try:
            response = await self._client.post(
                f"{self.BASE_URL}/{self._credentials.phone_number_id}/messages",
                headers=self._headers,
                json=payload,
            )
            response.raise_for_status()
            messages = response.json().get("messages") or [{}]
            message_id = messages[0].get("id")
            logger.info("WhatsApp message sent", message_id=message_id)
            return SendOutcome(success=True, message_id=message_id)

        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                self._state = SessionState.DISCONNECTED
            error_msg = f"WhatsApp API error: {e.response.status_code}"
            logger.error("WhatsApp delivery failed", error=error_msg)
            return SendOutcome(success=False, error=error_msg)

        except httpx.HTTPError as e:
            logger.error("WhatsApp delivery failed", error=str(e))
            return SendOutcome(success=False, error=str(e))

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._state = SessionState.CLOSED
        logger.info("WhatsApp session closed")
