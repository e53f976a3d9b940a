"""
Publish request and result model.

PublishRequest is validated on construction so a malformed request never
reaches a target. PublishResult holds one TargetOutcome per resolved target
and renders the response envelope returned to callers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ..errors import PublishValidationError
from .media_fetcher import MediaKind


@dataclass(frozen=True)
class PublishRequest:
    """One logical post to distribute across targets."""

    caption: str
    media_urls: tuple[str, ...]
    media_kind: MediaKind = MediaKind.IMAGE
    title: str | None = None
    targets: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.caption or not self.caption.strip():
            raise PublishValidationError("caption is required")
        if not self.media_urls:
            raise PublishValidationError(
                f"{self.media_kind.value}Urls (array of URLs) and caption are required"
            )
        if any(not url or not url.strip() for url in self.media_urls):
            raise PublishValidationError("media URLs must be non-empty strings")

    @property
    def text(self) -> str:
        """Caption with the optional title as its first line."""
        return f"{self.title}\n{self.caption}" if self.title else self.caption

    @property
    def primary_url(self) -> str:
        """First media URL; video flows only ever use this one."""
        return self.media_urls[0]


@dataclass(frozen=True)
class Success:
    """Target published; carries the platform's response."""

    response: dict[str, Any]


@dataclass(frozen=True)
class Failure:
    """Target failed; carries the error kind and diagnostic detail."""

    error_kind: str
    detail: Any = None


TargetOutcome = Success | Failure


@dataclass
class PublishResult:
    """Per-target outcomes of a publish request."""

    outcomes: dict[str, TargetOutcome] = field(default_factory=dict)

    def record(self, target: str, outcome: TargetOutcome) -> None:
        self.outcomes[target] = outcome

    @property
    def succeeded(self) -> list[str]:
        return [t for t, o in self.outcomes.items() if isinstance(o, Success)]

    @property
    def failed(self) -> list[str]:
        return [t for t, o in self.outcomes.items() if isinstance(o, Failure)]

    @property
    def summary(self) -> str:
        return f"Published to {len(self.succeeded)}/{len(self.outcomes)} targets"

    def to_envelope(self) -> dict[str, Any]:
        """Render the caller-facing response body."""
        results: dict[str, Any] = {}
        for target, outcome in self.outcomes.items():
            if isinstance(outcome, Success):
                results[target] = outcome.response
            else:
                results[target] = {
                    "error": {"kind": outcome.error_kind, "detail": outcome.detail}
                }
        return {"success": True, "results": results}

    @classmethod
    def from_envelope(cls, envelope: dict[str, Any]) -> "PublishResult":
        """Rebuild a result from a response body produced by to_envelope()."""
        result = cls()
        for target, body in envelope.get("results", {}).items():
            error = body.get("error") if isinstance(body, dict) else None
            if isinstance(error, dict) and "kind" in error:
                result.record(target, Failure(error["kind"], error.get("detail")))
            else:
                result.record(target, Success(body))
        return result


class Publisher(ABC):
    """
    Outbound port for multi-target publishing.

    Implementations must contain every per-target failure: a publish call
    only raises for request-level validation problems.
    """

    @abstractmethod
    async def publish(self, request: PublishRequest) -> PublishResult:
        """
        Publish content to the requested targets.

        Args:
            request: PublishRequest with content and target subset

        Returns:
            PublishResult with one outcome per resolved target
        """
        ...
