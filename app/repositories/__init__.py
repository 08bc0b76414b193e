"""
Repository layer exports.
Provides Firestore access layer for the application.
"""
from app.repositories.base import BaseRepository
from app.repositories.conversation_repo import ConversationRepository
from app.repositories.message_repo import MessageRepository
from app.repositories.user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "ConversationRepository",
    "MessageRepository",
    "UserRepository",
]
