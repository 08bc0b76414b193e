"""
Firestore document models for the chat backend.
"""
from app.models.base import FirestoreModel
from app.models.conversation import Conversation, ChatStatus, chat_room_id
from app.models.message import Message, MessageType
from app.models.user import UserProfile

__all__ = [
    "FirestoreModel",
    "Conversation",
    "ChatStatus",
    "chat_room_id",
    "Message",
    "MessageType",
    "UserProfile",
]
