"""
Base model for Firestore documents.

Documents are stored with camelCase field names; models expose snake_case
attributes and accept either form.
"""
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split('_')
    return components[0] + ''.join(x.title() for x in components[1:])


DocumentT = TypeVar("DocumentT", bound="FirestoreModel")


class FirestoreModel(BaseModel):
    """Base class for all Firestore document models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str = Field(default="", description="Document ID")

    @classmethod
    def from_snapshot(cls: Type[DocumentT], snapshot: Any) -> Optional[DocumentT]:
        """
        Build a model from a Firestore DocumentSnapshot.

        Returns:
            Model instance or None if the document does not exist
        """
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        return cls.model_validate({**data, "id": snapshot.id})

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the camelCase field map stored in Firestore (without the id)."""
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)
