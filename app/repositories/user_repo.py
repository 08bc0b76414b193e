"""
User repository for friend and block lists.
"""
from google.cloud.firestore import AsyncClient

from app.models.user import USERS_COLLECTION, UserProfile
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserProfile]):
    """Repository for ``users`` documents."""

    def __init__(self, db: AsyncClient):
        super().__init__(UserProfile, db, db.collection(USERS_COLLECTION))

    async def are_friends(self, uid: str, other_uid: str) -> bool:
        """True when ``other_uid`` is in ``uid``'s friends list."""
        profile = await self.get(uid)
        return bool(profile) and other_uid in profile.friends
