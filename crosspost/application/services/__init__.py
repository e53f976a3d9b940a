from .publish_service import PublishService

__all__ = ["PublishService"]
