"""
Message repository for a conversation's messages subcollection.
"""
from typing import Any, List, Optional

from google.cloud import firestore
from google.cloud.firestore import AsyncClient

from app.models.conversation import CHAT_ROOMS_COLLECTION
from app.models.message import MESSAGES_COLLECTION, Message
from app.repositories.base import BaseRepository


class MessageRepository(BaseRepository[Message]):
    """Repository for ``chat_rooms/{chat_id}/messages``."""

    def __init__(self, db: AsyncClient, chat_id: str):
        collection = (
            db.collection(CHAT_ROOMS_COLLECTION)
            .document(chat_id)
            .collection(MESSAGES_COLLECTION)
        )
        super().__init__(Message, db, collection)
        self.chat_id = chat_id

    def new_ref(self) -> Any:
        """Reference for a new message with an auto-generated ID."""
        return self.collection.document()

    async def fetch_page(
        self,
        limit: int,
        start_after: Optional[Any] = None
    ) -> List[Any]:
        """
        Fetch the next page of message snapshots in document-ID order.

        Args:
            limit: Maximum number of messages
            start_after: Last snapshot of the previous page, if any

        Returns:
            List of DocumentSnapshots (the last one is the next cursor)
        """
        query = self.collection.limit(limit)
        if start_after is not None:
            query = query.start_after(start_after)
        return await query.get()

    async def list_recent(self, limit: int = 50) -> List[Message]:
        """
        Get the newest messages first.

        Args:
            limit: Maximum number of messages

        Returns:
            List of messages ordered by timestamp descending
        """
        query = (
            self.collection
            .order_by("timestamp", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        return self.to_models(await query.get())
