"""
Conversation repository for chat room documents.
"""
from typing import Any, Dict

from google.cloud import firestore
from google.cloud.firestore import AsyncClient

from app.models.conversation import CHAT_ROOMS_COLLECTION, Conversation
from app.models.message import MessageType
from app.repositories.base import BaseRepository


class ConversationRepository(BaseRepository[Conversation]):
    """Repository for ``chat_rooms`` documents."""

    def __init__(self, db: AsyncClient):
        super().__init__(Conversation, db, db.collection(CHAT_ROOMS_COLLECTION))

    @staticmethod
    def summary_reset() -> Dict[str, Any]:
        """Field values that reset the last-message preview."""
        return {
            "lastMessage": "",
            "lastMessageType": MessageType.TEXT.value,
            "lastMessageTimestamp": firestore.SERVER_TIMESTAMP,
        }

    @staticmethod
    def new_chat_room(uid_a: str, uid_b: str, status: str) -> Dict[str, Any]:
        """Initial document for a conversation created on first interaction."""
        return {
            "participants": [uid_a, uid_b],
            "lastMessage": "",
            "lastMessageType": MessageType.TEXT.value,
            "lastMessageTimestamp": firestore.SERVER_TIMESTAMP,
            "unreadCount": {uid_a: 0, uid_b: 0},
            "chatStatus": {uid_a: status, uid_b: status},
        }
