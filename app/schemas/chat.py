"""
Pydantic schemas for callable requests and responses.

Callable clients wrap arguments as ``{"data": {...}}`` and expect
``{"result": {...}}`` back.
"""
from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.base import to_camel
from app.models.message import MessageType

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Schema accepting and emitting camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Envelope
# ============================================================================

class CallableRequest(BaseModel, Generic[DataT]):
    """Callable request envelope."""

    data: DataT


class CallableResponse(BaseModel):
    """Callable response envelope."""

    result: Any


# ============================================================================
# Request Schemas
# ============================================================================

class ClearChatData(CamelModel):
    """Arguments of clearChat. The service rejects a missing chatId."""

    chat_id: Optional[str] = Field(None, description="Conversation ID")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": {"chatId": "uidA_uidB"}},
    )


class SendMessageData(CamelModel):
    """Arguments of sendMessage."""

    recipient_uid: Optional[str] = Field(None, description="uid of the other user")
    type: MessageType = Field(default=MessageType.TEXT, description="Message type")
    content: str = Field(..., max_length=10000, description="Text or media URL")
    reply_to_message_id: Optional[str] = Field(None, description="ID of message being replied to")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Ensure content is not empty or whitespace."""
        if len(v.strip()) == 0:
            raise ValueError("Content cannot be empty or whitespace only")
        return v


class DeleteMessageData(CamelModel):
    """Arguments of deleteMessage."""

    chat_id: Optional[str] = Field(None, description="Conversation ID")
    message_id: Optional[str] = Field(None, description="Message ID")


class BlockUserData(CamelModel):
    """Arguments of blockUser and unblockUser."""

    blocked_uid: Optional[str] = Field(None, description="uid of the user to (un)block")


# ============================================================================
# Response Schemas
# ============================================================================

class ClearChatResult(BaseModel):
    """Outcome of one clearChat invocation."""

    chat_id: str
    pages: int = Field(default=0, description="Message pages fetched")
    marked: int = Field(default=0, description="Messages cleared for the caller only")
    deleted: int = Field(default=0, description="Messages removed from the store")
    media_deleted: int = Field(default=0, description="Storage objects removed")
    summary_reset: bool = Field(default=False, description="Last-message preview was reset")


class SuccessResult(BaseModel):
    success: bool = True


class SendMessageResult(CamelModel):
    success: bool = True
    chat_id: str
    message_id: str


class MessageResponse(CamelModel):
    """Schema for a message as returned to clients."""

    id: str
    sender_id: str
    type: str
    content: str
    timestamp: Optional[datetime] = None
    is_deleted: bool = False
    reply_to_message_id: Optional[str] = None


class MessageListResponse(BaseModel):
    """Schema for a page of messages."""

    data: List[MessageResponse]
    has_more: bool
