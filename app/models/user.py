"""
User profile document model (the relationship lists only).
"""
from typing import List

from pydantic import Field

from app.models.base import FirestoreModel

USERS_COLLECTION = "users"


class UserProfile(FirestoreModel):
    """Friend and block lists kept on ``users/{uid}``."""

    friends: List[str] = Field(default_factory=list)
    blocked_users: List[str] = Field(default_factory=list)
    blocked_by_users: List[str] = Field(default_factory=list)
