"""
Service layer exports.
Provides business logic for the application.
"""
from app.services.block_service import BlockService
from app.services.chat_service import ChatService
from app.services.storage_service import StorageService

__all__ = [
    "BlockService",
    "ChatService",
    "StorageService",
]
