from fastapi import APIRouter, Depends, status

from ....application.dtos import PublishPostDTO, PublishResponseDTO, ValidationFailureDTO
from ....application.services import PublishService
from ..dependencies import get_publish_service

router = APIRouter(prefix="/posts", tags=["posts"])

VALIDATION_RESPONSE = {status.HTTP_400_BAD_REQUEST: {"model": ValidationFailureDTO}}


@router.post(
    "/images",
    response_model=PublishResponseDTO,
    responses=VALIDATION_RESPONSE,
    summary="Publish an image post",
    description=(
        "Publish one or more images with a caption to the requested targets. "
        "Target names are matched case-insensitively and results are keyed by the lower-case target id."
    ),
)
async def publish_images(
    request: PublishPostDTO,
    service: PublishService = Depends(get_publish_service),
) -> dict:
    return await service.publish_images(request)


@router.post(
    "/videos",
    response_model=PublishResponseDTO,
    responses=VALIDATION_RESPONSE,
    summary="Publish a video post",
    description=(
        "Publish the first video URL with a caption to the requested targets. "
        "Target names are matched case-insensitively and results are keyed by the lower-case target id."
    ),
)
async def publish_video(
    request: PublishPostDTO,
    service: PublishService = Depends(get_publish_service),
) -> dict:
    return await service.publish_video(request)
