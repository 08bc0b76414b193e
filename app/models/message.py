"""
Message document model.

Messages live under ``chat_rooms/{chatId}/messages``.
"""
import enum
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.models.base import FirestoreModel

MESSAGES_COLLECTION = "messages"

DELETED_TEXT_PLACEHOLDER = "This message was deleted"
DELETED_MEDIA_PLACEHOLDER = "This media was deleted"


class MessageType(str, enum.Enum):
    """Enum for message types."""
    TEXT = "text"
    IMAGE = "image"
    PHOTO = "photo"  # legacy alias of image
    VIDEO = "video"
    LIVE_PHOTO = "live_photo"
    VOICE = "voice"
    SHARED_POST = "shared_post"


# Types whose content is a Storage object that clearing or deleting removes
MEDIA_TYPES = frozenset({MessageType.IMAGE.value, MessageType.VIDEO.value, MessageType.PHOTO.value})


def looks_like_url(value: Optional[str]) -> bool:
    """True when value is an http(s) URL string."""
    return bool(value) and (value.startswith("http://") or value.startswith("https://"))


class Message(FirestoreModel):
    """
    A chat message.

    ``deleted_for`` holds the uids that cleared this message from their own
    view. The message is removed from the store only once it covers both
    participants of the conversation.
    """

    sender_id: str = Field(default="", description="uid of the sender")
    type: str = Field(default=MessageType.TEXT.value, description="Message type")
    content: str = Field(default="", description="Text, or a media URL for media messages")
    timestamp: Optional[datetime] = None
    is_deleted: bool = Field(default=False, description="Soft deleted by its sender")
    original_media_url: Optional[str] = Field(
        default=None,
        alias="originalMediaURL",
        description="Media URL preserved when a media message is soft deleted"
    )
    deleted_for: List[str] = Field(default_factory=list, description="uids that cleared this message")
    reply_to_message_id: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, v):
        return v or MessageType.TEXT.value

    @field_validator("content", mode="before")
    @classmethod
    def default_content(cls, v):
        return v if isinstance(v, str) else ""

    @field_validator("deleted_for", mode="before")
    @classmethod
    def default_deleted_for(cls, v):
        return list(v) if v else []

    @property
    def is_media(self) -> bool:
        return self.type in MEDIA_TYPES

    def media_reference(self) -> str:
        """
        Best available reference to the Storage object behind this message.

        Soft-deleted messages carry a placeholder as content, so the preserved
        ``originalMediaURL`` wins when present.
        """
        if self.is_deleted and self.original_media_url:
            return self.original_media_url
        return self.content
