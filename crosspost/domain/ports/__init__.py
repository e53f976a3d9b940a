from .media_fetcher import (
    FetchFailure,
    MediaAsset,
    MediaBuffer,
    MediaFetcher,
    MediaKind,
    MediaReference,
)
from .messaging_session import MessagingSession, SendOutcome, SessionNotReady, SessionState
from .publisher import (
    Failure,
    Publisher,
    PublishRequest,
    PublishResult,
    Success,
    TargetOutcome,
)
from .target_adapter import TargetAdapter

__all__ = [
    "Failure",
    "FetchFailure",
    "MediaAsset",
    "MediaBuffer",
    "MediaFetcher",
    "MediaKind",
    "MediaReference",
    "MessagingSession",
    "Publisher",
    "PublishRequest",
    "PublishResult",
    "SendOutcome",
    "SessionNotReady",
    "SessionState",
    "Success",
    "TargetAdapter",
    "TargetOutcome",
]
