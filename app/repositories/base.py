"""
Base repository with common document operations.
All repositories should extend this class for Firestore access.
"""
from typing import Any, Generic, List, Optional, Type, TypeVar

from google.cloud.firestore import AsyncClient

from app.models.base import FirestoreModel

ModelType = TypeVar("ModelType", bound=FirestoreModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common document operations.

    Provides generic Firestore access that can be reused across all
    repositories. Subclasses pick the collection; nested collections pass the
    parent reference's collection in ``collection``.
    """

    def __init__(self, model: Type[ModelType], db: AsyncClient, collection: Any):
        """
        Initialize repository.

        Args:
            model: Document model class
            db: Async Firestore client
            collection: Collection reference holding the documents
        """
        self.model = model
        self.db = db
        self.collection = collection

    def ref(self, id: str) -> Any:
        """Document reference for ``id``."""
        return self.collection.document(id)

    async def get(self, id: str) -> Optional[ModelType]:
        """
        Get a document by ID.

        Args:
            id: Document ID

        Returns:
            Model instance or None if not found

        Example:
            ```python
            conversation = await conversation_repo.get(chat_id)
            if conversation:
                print(conversation.participants)
            ```
        """
        snapshot = await self.ref(id).get()
        return self.model.from_snapshot(snapshot)

    async def exists(self, id: str) -> bool:
        """Check whether a document exists."""
        snapshot = await self.ref(id).get()
        return snapshot.exists

    def to_models(self, snapshots: List[Any]) -> List[ModelType]:
        """Convert query snapshots into models."""
        return [self.model.from_snapshot(snapshot) for snapshot in snapshots]
