"""
Two-phase protocol: stage every media item unpublished, then create one
post that references all staged identifiers.

Individual staging failures are skipped. A staged identifier that is never
referenced stays on the platform as an orphan; those are logged, not
cleaned up, since cleanup could delete content that later succeeds.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from ..domain.errors import NoValidMedia, PublishError

logger = structlog.get_logger()


@dataclass
class StagedMediaSet:
    """Ordered platform identifiers produced by staging calls."""

    media_ids: list[str] = field(default_factory=list)
    consumed: bool = False

    def add(self, media_id: str) -> None:
        self.media_ids.append(media_id)

    def consume(self) -> list[str]:
        """Hand the identifiers to the finalize call; allowed once."""
        if self.consumed:
            raise RuntimeError("Staged media set already consumed")
        self.consumed = True
        return list(self.media_ids)

    def __len__(self) -> int:
        return len(self.media_ids)


class StagedMediaProtocol(ABC):
    """
    Stage N media objects, then finalize a single post.

    Subclasses provide the platform calls; run() owns the sequencing.
    """

    target: str = ""

    @abstractmethod
    async def stage(self, url: str) -> str:
        """Stage one media URL and return its platform identifier."""
        ...

    @abstractmethod
    async def finalize(self, media_ids: list[str]) -> dict[str, Any]:
        """Create the post referencing every staged identifier."""
        ...

    async def run(self, urls: list[str] | tuple[str, ...]) -> dict[str, Any]:
        staged = StagedMediaSet()
        for url in urls:
            try:
                staged.add(await self.stage(url))
            except (PublishError, httpx.HTTPError) as e:
                logger.warning(
                    "Skipping media that failed to stage",
                    target=self.target,
                    url=url,
                    error=str(e),
                )

        if not staged:
            raise NoValidMedia(f"No valid media for {self.target}", detail={"urls": list(urls)})

        media_ids = staged.consume()
        try:
            return await self.finalize(media_ids)
        except Exception:
            logger.warning(
                "Staged media left unpublished",
                target=self.target,
                media_ids=media_ids,
            )
            raise
