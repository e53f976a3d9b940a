"""
Outbound port for the messaging relay.

The session is an explicitly owned handle with a lifecycle, created and
torn down by whoever owns it (the HTTP app lifespan) and passed to the
code that sends through it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class SessionState(str, Enum):
    """Lifecycle of a messaging session."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"
    CLOSED = "closed"


@dataclass
class SendOutcome:
    """Result of a send attempt."""

    success: bool
    message_id: str | None = None
    error: str | None = None


class SessionNotReady(Exception):
    """Raised when sending through a session that is not READY."""


class MessagingSession(ABC):
    """Port for sending messages through a long-lived messaging session."""

    @property
    @abstractmethod
    def state(self) -> SessionState:
        ...

    @abstractmethod
    async def connect(self) -> SessionState:
        """Bring the session to READY, or back to DISCONNECTED after bounded retries."""
        ...

    @abstractmethod
    async def send(
        self,
        destination: str,
        content: str,
        media_url: str | None = None,
    ) -> SendOutcome:
        """
        Send a message to a destination.

        Raises:
            SessionNotReady: If the session is not READY
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Tear the session down; it cannot be reconnected afterwards."""
        ...
