from fastapi import APIRouter, Depends, HTTPException, status

from ....application.dtos import SendMessageDTO
from ....domain.ports import MessagingSession, SessionNotReady
from ..dependencies import get_messaging_session

router = APIRouter(prefix="/messaging", tags=["messaging"])


@router.post(
    "/send",
    response_model=dict,
    summary="Send a message",
    description="Relay a message through the messaging session.",
)
async def send_message(
    request: SendMessageDTO,
    session: MessagingSession = Depends(get_messaging_session),
) -> dict:
    try:
        outcome = await session.send(
            destination=request.destination,
            content=request.content,
            media_url=request.media_url,
        )
    except SessionNotReady as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    if not outcome.success:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=outcome.error)
    return {"success": True, "messageId": outcome.message_id}
