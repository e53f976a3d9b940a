"""
Resumable chunked upload: start / transfer loop / finish.

The platform owns the offsets. After every chunk the client asks the
platform where to continue and adopts that cursor as-is; it never derives
the next cursor from the chunk size, because the platform may ask for a
different slice on retry.

The loop ends exactly when cursor == end_offset. Three guards turn a
misbehaving session into StalledUpload instead of an endless loop:
- too many consecutive iterations without the cursor advancing,
- too many iterations overall,
- the whole transfer phase exceeding a wall-clock limit.
An abandoned session is logged and left on the platform.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import structlog

from ..domain.errors import StalledUpload

logger = structlog.get_logger()

DEFAULT_CHUNK_SIZE = 4 * 1024 * 1024


@dataclass
class ChunkedUploadSession:
    """Server-tracked upload session."""

    session_id: str
    object_id: str | None
    cursor: int
    end_offset: int

    @property
    def complete(self) -> bool:
        return self.cursor == self.end_offset


class ResumableChunkedUpload(ABC):
    """Template for offset-addressed chunked uploads."""

    target: str = ""

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_iterations: int = 1000,
        max_stalled_polls: int = 3,
        max_duration: float | None = 600.0,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self.max_iterations = max_iterations
        self.max_stalled_polls = max_stalled_polls
        self.max_duration = max_duration

    @abstractmethod
    async def start(self, total_size: int) -> ChunkedUploadSession:
        """Open a session for total_size bytes."""
        ...

    @abstractmethod
    async def transfer(self, session: ChunkedUploadSession, chunk: bytes) -> None:
        """Upload one chunk starting at session.cursor."""
        ...

    @abstractmethod
    async def status(self, session: ChunkedUploadSession) -> tuple[int, int]:
        """Ask the platform for the authoritative (cursor, end_offset)."""
        ...

    @abstractmethod
    async def finish(self, session: ChunkedUploadSession) -> dict[str, Any]:
        """Close the session and return the published object."""
        ...

    async def run(self, data: bytes) -> dict[str, Any]:
        session = await self.start(len(data))
        logger.info(
            "Chunked upload started",
            target=self.target,
            session_id=session.session_id,
            total_size=len(data),
        )

        try:
            async with asyncio.timeout(self.max_duration):
                iterations = await self._transfer_loop(session, data)
        except TimeoutError:
            self._log_abandoned(session, "wall-clock limit exceeded")
            raise StalledUpload(
                f"{self.target} upload exceeded {self.max_duration}s",
                detail={"session_id": session.session_id, "cursor": session.cursor},
            ) from None

        logger.info(
            "Chunked upload transferred",
            target=self.target,
            session_id=session.session_id,
            iterations=iterations,
        )
        return await self.finish(session)

    async def _transfer_loop(self, session: ChunkedUploadSession, data: bytes) -> int:
        iterations = 0
        stalled = 0
        while not session.complete:
            if iterations >= self.max_iterations:
                self._stall(session, f"no completion after {iterations} iterations")

            boundary = min(session.cursor + self.chunk_size, session.end_offset)
            await self.transfer(session, data[session.cursor:boundary])
            iterations += 1

            cursor, end_offset = await self.status(session)
            if cursor < session.cursor:
                self._stall(session, f"cursor moved backwards to {cursor}")
            if cursor == session.cursor:
                stalled += 1
                if stalled > self.max_stalled_polls:
                    self._stall(session, f"cursor stuck at {cursor}")
            else:
                stalled = 0

            session.cursor = cursor
            session.end_offset = end_offset
        return iterations

    def _stall(self, session: ChunkedUploadSession, reason: str) -> None:
        self._log_abandoned(session, reason)
        raise StalledUpload(
            f"{self.target} upload stalled: {reason}",
            detail={
                "session_id": session.session_id,
                "cursor": session.cursor,
                "end_offset": session.end_offset,
            },
        )

    def _log_abandoned(self, session: ChunkedUploadSession, reason: str) -> None:
        logger.warning(
            "Chunked upload session abandoned",
            target=self.target,
            session_id=session.session_id,
            object_id=session.object_id,
            cursor=session.cursor,
            end_offset=session.end_offset,
            reason=reason,
        )
