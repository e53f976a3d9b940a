from .fanout_publisher import FanOutPublisher
from .target_registry import ResolvedTarget, TargetRegistry

__all__ = [
    "FanOutPublisher",
    "ResolvedTarget",
    "TargetRegistry",
]
