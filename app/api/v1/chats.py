"""
Chat read routes.
Provides the caller's view of a conversation's messages.
"""
from fastapi import APIRouter, Depends

from app.dependencies import get_chat_service, get_current_uid, get_pagination_limit
from app.schemas.chat import MessageListResponse, MessageResponse
from app.services.chat_service import ChatService

router = APIRouter()


@router.get(
    "/{chat_id}/messages",
    response_model=MessageListResponse,
    summary="Get chat messages",
    description="Newest messages first, without the ones the caller cleared."
)
async def get_chat_messages(
    chat_id: str,
    limit: int = Depends(get_pagination_limit),
    uid: str = Depends(get_current_uid),
    service: ChatService = Depends(get_chat_service)
):
    """
    Get messages in a chat.

    - **chat_id**: Conversation ID
    - **limit**: Number of messages (max 100)
    """
    messages, has_more = await service.list_messages(uid, chat_id, limit)
    return {
        "data": [MessageResponse.model_validate(m.model_dump()) for m in messages],
        "has_more": has_more,
    }
