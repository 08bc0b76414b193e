"""
Pydantic schema exports.
Provides request/response models for API endpoints.
"""
from app.schemas.chat import (
    BlockUserData,
    CallableRequest,
    CallableResponse,
    ClearChatData,
    ClearChatResult,
    DeleteMessageData,
    MessageListResponse,
    MessageResponse,
    SendMessageData,
    SendMessageResult,
    SuccessResult,
)

__all__ = [
    "BlockUserData",
    "CallableRequest",
    "CallableResponse",
    "ClearChatData",
    "ClearChatResult",
    "DeleteMessageData",
    "MessageListResponse",
    "MessageResponse",
    "SendMessageData",
    "SendMessageResult",
    "SuccessResult",
]
