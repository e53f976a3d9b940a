"""
Fan-out publisher implementation.

Runs every resolved target's adapter as its own task behind an isolation
boundary, so one target's failure or crash never affects another, and
merges the outcomes into one PublishResult.
"""

import asyncio

import httpx
import structlog

from ...domain.errors import DependencyFailed, PublishError, PublishValidationError
from ...domain.ports import (
    Failure,
    MediaFetcher,
    Publisher,
    PublishRequest,
    PublishResult,
    Success,
    TargetOutcome,
)
from ..logging import Timer
from .target_registry import ResolvedTarget, TargetRegistry

logger = structlog.get_logger()


class FanOutPublisher(Publisher):
    """
    Publisher that dispatches one request to many targets concurrently.

    Targets share nothing but the read-only request and credentials; each
    task owns its own HTTP client. A dependent target awaits its parent's
    task and only runs after the parent succeeded. No retries are made.
    """

    def __init__(
        self,
        registry: TargetRegistry,
        fetcher: MediaFetcher,
        request_timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._registry = registry
        self._fetcher = fetcher
        self._request_timeout = request_timeout
        self._transport = transport

    async def publish(self, request: PublishRequest) -> PublishResult:
        """
        Publish content to every resolvable requested target.

        Args:
            request: Validated PublishRequest

        Returns:
            PublishResult with one outcome per resolved target

        Raises:
            PublishValidationError: If no requested target can be resolved
        """
        resolved = self._registry.resolve(request.targets)
        if not resolved:
            raise PublishValidationError(
                "No known targets requested",
                detail={"requested": list(request.targets)},
            )

        result = PublishResult()
        tasks: dict[str, asyncio.Task[TargetOutcome]] = {}
        for target in resolved:
            parent = tasks.get(target.depends_on) if target.depends_on else None
            tasks[target.target_id] = asyncio.create_task(
                self._run_target(target, request, result, parent),
                name=f"publish:{target.target_id}",
            )

        logger.info(
            "Publishing to targets",
            targets=list(tasks),
            media_kind=request.media_kind.value,
            media_count=len(request.media_urls),
        )

        # In-flight protocols run to completion even if the caller goes away
        await asyncio.shield(asyncio.gather(*tasks.values()))

        logger.info(
            "Publish completed",
            summary=result.summary,
            failed=result.failed,
        )
        return result

    async def _run_target(
        self,
        target: ResolvedTarget,
        request: PublishRequest,
        result: PublishResult,
        parent: asyncio.Task[TargetOutcome] | None,
    ) -> TargetOutcome:
        if parent is not None:
            parent_outcome = await parent
            if not isinstance(parent_outcome, Success):
                error = DependencyFailed(
                    f"{target.depends_on} did not succeed",
                    detail={"parent": target.depends_on},
                )
                outcome: TargetOutcome = Failure(error.kind, error.to_detail())
                result.record(target.target_id, outcome)
                logger.warning(
                    "Dependent target skipped",
                    target=target.target_id,
                    parent=target.depends_on,
                )
                return outcome

        outcome = await self._invoke(target, request)
        result.record(target.target_id, outcome)
        return outcome

    async def _invoke(self, target: ResolvedTarget, request: PublishRequest) -> TargetOutcome:
        """Isolation boundary: every error becomes this target's Failure."""
        with Timer() as t:
            try:
                async with httpx.AsyncClient(
                    timeout=self._request_timeout,
                    transport=self._transport,
                ) as client:
                    response = await target.adapter.publish(client, request, self._fetcher)
                outcome: TargetOutcome = Success(response)

            except PublishError as e:
                logger.error(
                    "Target publish failed",
                    target=target.target_id,
                    error_kind=e.kind,
                    error=str(e),
                )
                outcome = Failure(e.kind, e.to_detail())

            except httpx.HTTPError as e:
                logger.error(
                    "Target transport failed",
                    target=target.target_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                outcome = Failure("PlatformError", str(e) or type(e).__name__)

            except Exception as e:
                logger.error(
                    "Target publish crashed",
                    target=target.target_id,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True,
                )
                outcome = Failure("UnexpectedError", str(e) or type(e).__name__)

        if isinstance(outcome, Success):
            logger.info(
                "Target published",
                target=target.target_id,
                duration_ms=t.duration_ms,
            )
        return outcome
