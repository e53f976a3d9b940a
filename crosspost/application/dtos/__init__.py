from .publish_dto import PublishPostDTO, PublishResponseDTO, SendMessageDTO, ValidationFailureDTO

__all__ = [
    "PublishPostDTO",
    "PublishResponseDTO",
    "SendMessageDTO",
    "ValidationFailureDTO",
]
