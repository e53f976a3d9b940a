import structlog
from fastapi import APIRouter, Depends

from ....domain.ports import MessagingSession, SessionState
from ....infrastructure.adapters import TargetRegistry
from ..dependencies import get_messaging_session, get_registry

router = APIRouter(tags=["health"])
logger = structlog.get_logger()


@router.get("/health", summary="Health check")
async def health() -> dict:
    """Basic health check for load balancer."""
    return {"status": "healthy"}


@router.get("/health/ready", summary="Readiness check")
async def readiness(
    registry: TargetRegistry = Depends(get_registry),
    session: MessagingSession = Depends(get_messaging_session),
) -> dict:
    """Readiness check - reports configured targets and the messaging session."""
    targets = {
        target_id: {"configured": registry.get(target_id).is_configured}
        for target_id in registry.known_targets
    }
    configured = [t for t, check in targets.items() if check["configured"]]

    return {
        "status": "ready" if configured else "degraded",
        "checks": {
            "targets": targets,
            "messaging": {
                "status": "healthy" if session.state == SessionState.READY else "unavailable",
                "state": session.state.value,
            },
        },
    }
