"""
Domain errors for the publishing orchestrator.

Every error carries a ``kind`` that becomes the ``error_kind`` of the
target's Failure outcome. Adapters raise these; the fan-out coordinator
contains them at the per-target boundary.
"""

from typing import Any


class PublishError(Exception):
    """Base class for all publish failures."""

    kind = "PublishError"

    def __init__(self, message: str, detail: Any = None) -> None:
        super().__init__(message)
        self.detail = detail

    def to_detail(self) -> Any:
        """Detail exposed in the target outcome."""
        return self.detail if self.detail is not None else str(self)


class PublishValidationError(PublishError):
    """Malformed or incomplete request, rejected before any target is contacted."""

    kind = "ValidationError"


class MediaFetchError(PublishError):
    """A media URL required by a single-media flow could not be retrieved."""

    kind = "FetchFailure"

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch media: {url}", detail={"url": url, "reason": reason})
        self.url = url


class PlatformError(PublishError):
    """Non-success response from an external platform API."""

    kind = "PlatformError"

    def __init__(self, target: str, status_code: int, payload: Any) -> None:
        super().__init__(f"{target} API error: {status_code}", detail=payload)
        self.target = target
        self.status_code = status_code


class NoValidMedia(PublishError):
    """Every media item failed to stage or fetch for a target."""

    kind = "NoValidMedia"


class StalledUpload(PublishError):
    """A chunked upload session stopped making forward progress."""

    kind = "StalledUpload"


class UnsupportedMedia(PublishError):
    """The target has no protocol for the requested media kind."""

    kind = "UnsupportedMedia"


class TargetNotConfigured(PublishError):
    """Credentials for the target are missing."""

    kind = "NotConfigured"


class DependencyFailed(PublishError):
    """A dependent target was skipped because its parent did not succeed."""

    kind = "DependencyFailed"
