"""
Registry mapping target identifiers to their adapters.

Selection is forgiving: unknown identifiers are dropped from the working
set instead of failing the request, so new targets can roll out
gradually.
"""

from dataclasses import dataclass

import structlog

from ...config import Settings
from ...domain.credentials import CredentialStore
from ...domain.ports import TargetAdapter
from ...targets import (
    FacebookAdapter,
    FacebookStoryAdapter,
    InstagramAdapter,
    InstagramStoryAdapter,
    LinkedInAdapter,
    TwitterAdapter,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class ResolvedTarget:
    """A selected target with its adapter."""

    target_id: str
    adapter: TargetAdapter

    @property
    def depends_on(self) -> str | None:
        return self.adapter.depends_on


class TargetRegistry:
    """
    Registry of known targets.

    Adapters are created once at startup with read-only credentials and
    shared across requests; they keep no per-request state.
    """

    def __init__(
        self,
        adapters: list[TargetAdapter] | None = None,
        default_targets: list[str] | None = None,
    ) -> None:
        self._adapters: dict[str, TargetAdapter] = {}
        for adapter in adapters or []:
            self.register(adapter)
        self._default_targets = default_targets

    def register(self, adapter: TargetAdapter) -> None:
        self._adapters[adapter.target_id] = adapter

    @property
    def known_targets(self) -> list[str]:
        return list(self._adapters)

    @property
    def default_targets(self) -> list[str]:
        if self._default_targets is None:
            return self.known_targets
        return list(self._default_targets)

    def get(self, target_id: str) -> TargetAdapter | None:
        return self._adapters.get(target_id)

    def resolve(self, requested: list[str] | tuple[str, ...] | None) -> list[ResolvedTarget]:
        """
        Resolve requested identifiers into the ordered working set.

        Args:
            requested: Target identifiers; empty or None selects the defaults

        Returns:
            Resolved targets, each dependent placed after its parent
        """
        names = list(requested) if requested else self.default_targets

        selected: dict[str, TargetAdapter] = {}
        for name in names:
            target_id = name.strip().lower()
            if target_id in selected:
                continue
            adapter = self._adapters.get(target_id)
            if adapter is None:
                logger.warning("Unknown target dropped", target=name)
                continue
            selected[target_id] = adapter

        resolved: list[ResolvedTarget] = []
        dependents: list[ResolvedTarget] = []
        for target_id, adapter in selected.items():
            if adapter.depends_on is None:
                resolved.append(ResolvedTarget(target_id, adapter))
            elif adapter.depends_on in selected:
                dependents.append(ResolvedTarget(target_id, adapter))
            else:
                logger.warning(
                    "Dependent target dropped, parent not requested",
                    target=target_id,
                    parent=adapter.depends_on,
                )

        return resolved + dependents

    @classmethod
    def from_settings(cls, settings: Settings) -> "TargetRegistry":
        """Build the registry of every supported target from settings."""
        credentials = CredentialStore.from_settings(settings)
        upload_guards = {
            "chunk_size": settings.chunk_size,
            "max_iterations": settings.upload_max_iterations,
            "max_stalled_polls": settings.upload_max_stalled_polls,
            "max_duration": settings.upload_max_duration,
        }
        adapters: list[TargetAdapter] = [
            FacebookAdapter(
                credentials.facebook,
                graph_version=settings.meta_graph_version,
                upload_timeout=settings.upload_timeout,
                **upload_guards,
            ),
            FacebookStoryAdapter(credentials.facebook, graph_version=settings.meta_graph_version),
            InstagramAdapter(
                credentials.instagram,
                graph_version=settings.meta_graph_version,
                poll_interval=settings.instagram_poll_interval,
                max_polls=settings.instagram_max_polls,
            ),
            InstagramStoryAdapter(credentials.instagram, graph_version=settings.meta_graph_version),
            LinkedInAdapter(credentials.linkedin, upload_timeout=settings.upload_timeout),
            TwitterAdapter(
                credentials.twitter,
                upload_timeout=settings.upload_timeout,
                chunk_size=settings.chunk_size,
                poll_interval=settings.twitter_poll_interval,
                max_polls=settings.twitter_max_polls,
            ),
        ]
        return cls(adapters, default_targets=settings.default_targets)
