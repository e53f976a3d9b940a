from fastapi import Request

from ...application.services import PublishService
from ...domain.ports import MessagingSession
from ...infrastructure.adapters import TargetRegistry


def get_publish_service(request: Request) -> PublishService:
    return PublishService(request.app.state.publisher)


def get_messaging_session(request: Request) -> MessagingSession:
    return request.app.state.messaging_session


def get_registry(request: Request) -> TargetRegistry:
    return request.app.state.registry
