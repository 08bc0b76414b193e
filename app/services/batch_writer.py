"""
Paired write batches for one page of a chat clear.

Updates and deletes go into separate Firestore batches that are committed
one after the other, updates first. Page size is capped at 500 in settings,
so neither batch holds more message operations than that.
"""
from typing import Any, Dict, List, Optional, Tuple

from google.cloud import firestore
from google.cloud.firestore import AsyncClient

from app.models.message import Message


class DualBatchWriter:
    """Accumulates one page's updates and deletes and commits them in order."""

    def __init__(self, db: AsyncClient):
        self.update_batch = db.batch()
        self.delete_batch = db.batch()
        self.update_count = 0
        self.delete_count = 0
        self.summary_staged = False
        self.pending_media: List[Tuple[str, Optional[str]]] = []

    @property
    def has_updates(self) -> bool:
        return self.update_count > 0 or self.summary_staged

    @property
    def has_deletes(self) -> bool:
        return self.delete_count > 0

    def stage_clear_mark(self, message_ref: Any, uid: str) -> None:
        """
        Stage adding ``uid`` to a message's ``deletedFor``.

        ArrayUnion keeps concurrent clears from both participants commutative.
        """
        self.update_batch.update(message_ref, {"deletedFor": firestore.ArrayUnion([uid])})
        self.update_count += 1

    def stage_delete(self, message_ref: Any, message: Message) -> None:
        """Stage a hard delete and remember the message's media for cleanup."""
        self.delete_batch.delete(message_ref)
        self.delete_count += 1
        self.pending_media.append((message.type, message.media_reference()))

    def stage_summary(self, ref: Any, fields: Dict[str, Any]) -> None:
        """Stage the conversation summary reset alongside the message updates."""
        self.update_batch.update(ref, fields)
        self.summary_staged = True

    async def commit_updates(self) -> bool:
        """Commit the update batch if anything was staged."""
        if not self.has_updates:
            return False
        await self.update_batch.commit()
        return True

    async def commit_deletes(self) -> bool:
        """Commit the delete batch if anything was staged."""
        if not self.has_deletes:
            return False
        await self.delete_batch.commit()
        return True
