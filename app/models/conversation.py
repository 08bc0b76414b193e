"""
Conversation (chat room) document model.

One conversation exists per unordered pair of users, keyed by
``chat_room_id``.
"""
import enum
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from app.models.base import FirestoreModel

CHAT_ROOMS_COLLECTION = "chat_rooms"


class ChatStatus(str, enum.Enum):
    """Per-participant relationship status stored on the conversation."""
    FRIENDS = "friends"
    UNADDED = "unadded"
    PENDING = "pending"
    BLOCKED = "blocked"


def chat_room_id(uid_a: str, uid_b: str) -> str:
    """Deterministic conversation key: both uids sorted and joined with '_'."""
    return "_".join(sorted([uid_a, uid_b]))


class Conversation(FirestoreModel):
    """A two-party conversation."""

    participants: List[str] = Field(default_factory=list)
    last_message: str = ""
    last_message_type: str = "text"
    last_message_timestamp: Optional[datetime] = None
    unread_count: Dict[str, int] = Field(default_factory=dict)
    chat_status: Dict[str, str] = Field(default_factory=dict)

    @field_validator("participants", mode="before")
    @classmethod
    def default_participants(cls, v):
        return [p for p in v if p] if isinstance(v, list) else []

    @field_validator("last_message", mode="before")
    @classmethod
    def default_last_message(cls, v):
        return v if isinstance(v, str) else ""

    @field_validator("last_message_type", mode="before")
    @classmethod
    def default_last_message_type(cls, v):
        return v or "text"

    @field_validator("unread_count", mode="before")
    @classmethod
    def default_unread_count(cls, v):
        if not isinstance(v, dict):
            return {}
        return {uid: count for uid, count in v.items() if isinstance(count, int)}

    @field_validator("chat_status", mode="before")
    @classmethod
    def default_chat_status(cls, v):
        if not isinstance(v, dict):
            return {}
        return {uid: status for uid, status in v.items() if isinstance(status, str)}

    def other_participant(self, uid: str) -> Optional[str]:
        """The participant who is not ``uid``, or None if there is none."""
        return next((p for p in self.participants if p != uid), None)

    @property
    def is_blocked(self) -> bool:
        return ChatStatus.BLOCKED.value in self.chat_status.values()
