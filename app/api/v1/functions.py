"""
Callable function routes.

Each route speaks the Firebase callable protocol: the request body is
``{"data": {...}}``, success returns ``{"result": {...}}`` and failures
return ``{"error": {"status": ..., "message": ...}}`` (see app.main).
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings
from app.dependencies import get_block_service, get_chat_service, get_current_uid_optional
from app.schemas.chat import (
    BlockUserData,
    CallableRequest,
    CallableResponse,
    ClearChatData,
    DeleteMessageData,
    SendMessageData,
    SendMessageResult,
    SuccessResult,
)
from app.services.block_service import BlockService
from app.services.chat_service import ChatService

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)

RATE_LIMIT = f"{settings.rate_limit_per_minute}/minute"


@router.post(
    "/clearChat",
    response_model=CallableResponse,
    summary="Clear a chat for the caller",
    description="One-sided clear. Messages both participants cleared are deleted with their media."
)
@limiter.limit(RATE_LIMIT)
async def clear_chat(
    request: Request,
    body: CallableRequest[ClearChatData],
    uid: Optional[str] = Depends(get_current_uid_optional),
    service: ChatService = Depends(get_chat_service)
):
    """
    Clear a chat for the calling user.

    - **chatId**: Conversation ID (sorted participant uids joined by "_")
    """
    await service.clear_chat(uid, body.data.chat_id)
    return {"result": SuccessResult().model_dump()}


@router.post(
    "/sendMessage",
    response_model=CallableResponse,
    summary="Send a message",
    description="Send a message to another user, creating the chat on first contact."
)
@limiter.limit(RATE_LIMIT)
async def send_message(
    request: Request,
    body: CallableRequest[SendMessageData],
    uid: Optional[str] = Depends(get_current_uid_optional),
    service: ChatService = Depends(get_chat_service)
):
    """
    Send a message.

    - **recipientUid**: uid of the other user
    - **type**: Message type (text, image, video, voice, ...)
    - **content**: Text or media URL
    - **replyToMessageId**: Optional message being replied to
    """
    data = body.data
    sent = await service.send_message(
        sender_uid=uid,
        recipient_uid=data.recipient_uid,
        message_type=data.type.value,
        content=data.content,
        reply_to_message_id=data.reply_to_message_id,
    )
    result = SendMessageResult(chat_id=sent["chat_id"], message_id=sent["message_id"])
    return {"result": result.model_dump(by_alias=True)}


@router.post(
    "/deleteMessage",
    response_model=CallableResponse,
    summary="Delete own message",
    description="Replace one of the caller's messages with a deleted-message placeholder."
)
@limiter.limit(RATE_LIMIT)
async def delete_message(
    request: Request,
    body: CallableRequest[DeleteMessageData],
    uid: Optional[str] = Depends(get_current_uid_optional),
    service: ChatService = Depends(get_chat_service)
):
    await service.delete_message(uid, body.data.chat_id, body.data.message_id)
    return {"result": SuccessResult().model_dump()}


@router.post(
    "/blockUser",
    response_model=CallableResponse,
    summary="Block a user"
)
@limiter.limit(RATE_LIMIT)
async def block_user(
    request: Request,
    body: CallableRequest[BlockUserData],
    uid: Optional[str] = Depends(get_current_uid_optional),
    service: BlockService = Depends(get_block_service)
):
    return {"result": await service.block_user(uid, body.data.blocked_uid)}


@router.post(
    "/unblockUser",
    response_model=CallableResponse,
    summary="Unblock a user"
)
@limiter.limit(RATE_LIMIT)
async def unblock_user(
    request: Request,
    body: CallableRequest[BlockUserData],
    uid: Optional[str] = Depends(get_current_uid_optional),
    service: BlockService = Depends(get_block_service)
):
    return {"result": await service.unblock_user(uid, body.data.blocked_uid)}
