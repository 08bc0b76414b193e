"""
Block service for blocking and unblocking users.
Keeps both users' block lists and the shared conversation status in step.
"""
import logging
from typing import Dict, Optional

from google.cloud import firestore
from google.cloud.firestore import AsyncClient

from app.core.errors import CallableError, Internal, InvalidArgument, Unauthenticated
from app.models.conversation import ChatStatus, chat_room_id
from app.repositories.conversation_repo import ConversationRepository
from app.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class BlockService:
    """Service for user blocking."""

    def __init__(self, db: AsyncClient):
        self.db = db
        self.user_repo = UserRepository(db)
        self.conversation_repo = ConversationRepository(db)

    @staticmethod
    def _validate(caller_uid: Optional[str], blocked_uid: Optional[str]) -> None:
        if not caller_uid:
            raise Unauthenticated("User must be authenticated")
        if not blocked_uid:
            raise InvalidArgument("blockedUid is required")
        if caller_uid == blocked_uid:
            raise InvalidArgument("Cannot block yourself")

    async def block_user(
        self,
        caller_uid: Optional[str],
        blocked_uid: Optional[str]
    ) -> Dict[str, bool]:
        """
        Block a user.

        In one batch: drop the friendship on both sides if it exists, record
        the block on both users, and mark the conversation blocked for both
        participants (creating it if they never talked).

        Raises:
            Unauthenticated: No caller identity
            InvalidArgument: Missing target or blocking oneself
            Internal: Any store failure
        """
        self._validate(caller_uid, blocked_uid)

        try:
            caller_ref = self.user_repo.ref(caller_uid)
            blocked_ref = self.user_repo.ref(blocked_uid)
            batch = self.db.batch()

            if await self.user_repo.are_friends(caller_uid, blocked_uid):
                batch.set(caller_ref, {"friends": firestore.ArrayRemove([blocked_uid])}, merge=True)
                batch.set(blocked_ref, {"friends": firestore.ArrayRemove([caller_uid])}, merge=True)

            batch.set(caller_ref, {"blockedUsers": firestore.ArrayUnion([blocked_uid])}, merge=True)
            batch.set(blocked_ref, {"blockedByUsers": firestore.ArrayUnion([caller_uid])}, merge=True)

            chat_id = chat_room_id(caller_uid, blocked_uid)
            chat_ref = self.conversation_repo.ref(chat_id)
            if await self.conversation_repo.exists(chat_id):
                batch.update(chat_ref, {
                    f"chatStatus.{caller_uid}": ChatStatus.BLOCKED.value,
                    f"chatStatus.{blocked_uid}": ChatStatus.BLOCKED.value,
                })
            else:
                batch.set(
                    chat_ref,
                    ConversationRepository.new_chat_room(caller_uid, blocked_uid, ChatStatus.BLOCKED.value)
                )

            await batch.commit()
        except CallableError:
            raise
        except Exception as e:
            logger.error(f"Error blocking user: {e}", extra={"uid": caller_uid, "blocked_uid": blocked_uid})
            raise Internal(f"Failed to block user: {e}")

        logger.info("User blocked successfully", extra={"uid": caller_uid, "blocked_uid": blocked_uid})
        return {"success": True}

    async def unblock_user(
        self,
        caller_uid: Optional[str],
        blocked_uid: Optional[str]
    ) -> Dict[str, bool]:
        """
        Unblock a user.

        Removes the block from both users and, if the conversation exists,
        restores its status to "friends" or "unadded".

        Raises:
            Unauthenticated: No caller identity
            InvalidArgument: Missing target or unblocking oneself
            Internal: Any store failure
        """
        self._validate(caller_uid, blocked_uid)

        try:
            batch = self.db.batch()
            batch.set(
                self.user_repo.ref(caller_uid),
                {"blockedUsers": firestore.ArrayRemove([blocked_uid])},
                merge=True
            )
            batch.set(
                self.user_repo.ref(blocked_uid),
                {"blockedByUsers": firestore.ArrayRemove([caller_uid])},
                merge=True
            )

            chat_id = chat_room_id(caller_uid, blocked_uid)
            if await self.conversation_repo.exists(chat_id):
                are_friends = await self.user_repo.are_friends(caller_uid, blocked_uid)
                status = ChatStatus.FRIENDS.value if are_friends else ChatStatus.UNADDED.value
                batch.update(self.conversation_repo.ref(chat_id), {
                    f"chatStatus.{caller_uid}": status,
                    f"chatStatus.{blocked_uid}": status,
                })

            await batch.commit()
        except CallableError:
            raise
        except Exception as e:
            logger.error(f"Error unblocking user: {e}", extra={"uid": caller_uid, "blocked_uid": blocked_uid})
            raise Internal(f"Failed to unblock user: {e}")

        logger.info("User unblocked successfully", extra={"uid": caller_uid, "blocked_uid": blocked_uid})
        return {"success": True}
