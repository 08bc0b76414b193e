"""
Chat service containing business logic for chat operations.
Handles sending, deleting and one-sided clearing of messages.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from google.cloud import firestore
from google.cloud.firestore import AsyncClient
from pydantic import ValidationError

from app.config import settings
from app.core.errors import (
    CallableError,
    FailedPrecondition,
    Internal,
    InvalidArgument,
    NotFound,
    PermissionDenied,
    Unauthenticated,
)
from app.models.conversation import ChatStatus, Conversation, chat_room_id
from app.models.message import (
    DELETED_MEDIA_PLACEHOLDER,
    DELETED_TEXT_PLACEHOLDER,
    Message,
    MessageType,
)
from app.repositories.conversation_repo import ConversationRepository
from app.repositories.message_repo import MessageRepository
from app.schemas.chat import ClearChatResult
from app.services.batch_writer import DualBatchWriter
from app.services.storage_service import StorageService
from app.services.tombstone import ClearAction, evaluate_message

logger = logging.getLogger(__name__)


class ChatService:
    """Service for chat operations with business logic."""

    def __init__(
        self,
        db: AsyncClient,
        storage_service: StorageService,
        page_size: Optional[int] = None
    ):
        """
        Initialize chat service.

        Args:
            db: Async Firestore client
            storage_service: Media cleanup service
            page_size: Messages per clear page (defaults to settings)
        """
        self.db = db
        self.storage_service = storage_service
        self.page_size = page_size or settings.clear_chat_batch_size
        self.conversation_repo = ConversationRepository(db)

    async def _get_conversation_for(self, chat_id: str, uid: str) -> Conversation:
        """
        Load a two-party conversation and verify ``uid`` is in it.

        Raises:
            NotFound: If the conversation does not exist
            FailedPrecondition: If it does not have exactly two participants
            PermissionDenied: If uid is not a participant
            Internal: If the stored document cannot be read
        """
        try:
            conversation = await self.conversation_repo.get(chat_id)
        except ValidationError as e:
            logger.error(f"Malformed chat room document: {e}", extra={"chat_id": chat_id})
            raise Internal("Invalid chat room data")

        if conversation is None:
            raise NotFound("Chat room not found")

        if len(conversation.participants) != 2:
            raise FailedPrecondition("Invalid chat room participants")

        if uid not in conversation.participants:
            raise PermissionDenied("You are not a participant in this chat")

        return conversation

    # ------------------------------------------------------------------
    # Clear chat
    # ------------------------------------------------------------------

    async def clear_chat(
        self,
        caller_uid: Optional[str],
        chat_id: Optional[str]
    ) -> ClearChatResult:
        """
        Clear a conversation for the caller only.

        Each message gets the caller added to ``deletedFor``; messages the
        other participant already cleared are deleted along with their media.
        The conversation's last-message preview is reset once.

        Args:
            caller_uid: Verified uid of the caller, None if unauthenticated
            chat_id: Conversation ID

        Returns:
            Counts of what the clear did

        Raises:
            Unauthenticated: No caller identity
            InvalidArgument: chat_id missing
            NotFound: Conversation does not exist
            FailedPrecondition: Conversation is not two-party
            PermissionDenied: Caller is not a participant
            Internal: A page fetch or batch commit failed
        """
        if not caller_uid:
            raise Unauthenticated("User must be authenticated")

        if not chat_id or not chat_id.strip():
            raise InvalidArgument("chatId is required")

        conversation = await self._get_conversation_for(chat_id, caller_uid)
        other_uid = conversation.other_participant(caller_uid)
        if other_uid is None:
            raise FailedPrecondition("Invalid chat room participants")

        try:
            result = await self._clear_pages(chat_id, caller_uid, other_uid)
        except CallableError:
            raise
        except Exception as e:
            logger.error(
                f"Error clearing chat: {e}",
                extra={"uid": caller_uid, "chat_id": chat_id}
            )
            raise Internal(f"Failed to clear chat: {e}")

        logger.info(
            f"Chat cleared successfully: {result.marked} marked, {result.deleted} deleted",
            extra={"uid": caller_uid, "chat_id": chat_id, "pages": result.pages}
        )
        return result

    async def _clear_pages(
        self,
        chat_id: str,
        caller_uid: str,
        other_uid: str
    ) -> ClearChatResult:
        """
        Walk the messages page by page, committing each page before the next fetch.

        Per page: stage every message, commit updates, commit deletes, then
        clean up media of the deleted messages. The summary reset rides in
        the first page's update commit.
        """
        messages = MessageRepository(self.db, chat_id)
        chat_ref = self.conversation_repo.ref(chat_id)
        result = ClearChatResult(chat_id=chat_id)
        cursor: Optional[Any] = None

        while True:
            snapshots = await messages.fetch_page(self.page_size, start_after=cursor)
            result.pages += 1

            writer = DualBatchWriter(self.db)
            if not result.summary_reset:
                writer.stage_summary(chat_ref, ConversationRepository.summary_reset())

            for snapshot in snapshots:
                message = Message.from_snapshot(snapshot)
                action = evaluate_message(message, caller_uid, other_uid)

                if action is ClearAction.MARK:
                    writer.stage_clear_mark(snapshot.reference, caller_uid)
                    result.marked += 1
                elif action is ClearAction.DELETE:
                    writer.stage_delete(snapshot.reference, message)
                    result.deleted += 1

            await writer.commit_updates()
            if writer.summary_staged:
                result.summary_reset = True

            await writer.commit_deletes()
            result.media_deleted += await self.storage_service.delete_many(writer.pending_media)

            if len(snapshots) < self.page_size:
                break
            cursor = snapshots[-1]

        return result

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def send_message(
        self,
        sender_uid: Optional[str],
        recipient_uid: Optional[str],
        message_type: str,
        content: str,
        reply_to_message_id: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Send a message, creating the conversation on first contact.

        Args:
            sender_uid: Verified uid of the sender
            recipient_uid: uid of the other user
            message_type: Message type
            content: Text or media URL
            reply_to_message_id: Optional message being replied to

        Returns:
            Dict with chat_id and message_id

        Raises:
            Unauthenticated: No caller identity
            InvalidArgument: Missing recipient/content or messaging oneself
            FailedPrecondition: The conversation is blocked
        """
        if not sender_uid:
            raise Unauthenticated("User must be authenticated")
        if not recipient_uid:
            raise InvalidArgument("recipientUid is required")
        if recipient_uid == sender_uid:
            raise InvalidArgument("Cannot send a message to yourself")
        if not content or not content.strip():
            raise InvalidArgument("content is required")

        chat_id = chat_room_id(sender_uid, recipient_uid)
        conversation = await self.conversation_repo.get(chat_id)
        if conversation is not None and conversation.is_blocked:
            raise FailedPrecondition("This chat is blocked")

        chat_ref = self.conversation_repo.ref(chat_id)
        message_ref = MessageRepository(self.db, chat_id).new_ref()

        message = Message(
            sender_id=sender_uid,
            type=message_type,
            content=content,
            reply_to_message_id=reply_to_message_id,
        )
        message_data = message.to_document()
        message_data["timestamp"] = firestore.SERVER_TIMESTAMP

        if message_type == MessageType.TEXT.value:
            preview = content
        else:
            preview = f"[{message_type.title()}]"

        batch = self.db.batch()
        if conversation is None:
            batch.set(
                chat_ref,
                ConversationRepository.new_chat_room(sender_uid, recipient_uid, ChatStatus.UNADDED.value)
            )
        batch.set(message_ref, message_data)
        batch.update(chat_ref, {
            "lastMessage": preview,
            "lastMessageType": message_type,
            "lastMessageTimestamp": firestore.SERVER_TIMESTAMP,
            f"unreadCount.{recipient_uid}": firestore.Increment(1),
        })
        await batch.commit()

        logger.info(
            f"Message sent: {message_ref.id}",
            extra={"chat_id": chat_id, "type": message_type}
        )
        return {"chat_id": chat_id, "message_id": message_ref.id}

    async def delete_message(
        self,
        caller_uid: Optional[str],
        chat_id: Optional[str],
        message_id: Optional[str]
    ) -> Dict[str, str]:
        """
        Delete one of the caller's own messages for everyone.

        The message is replaced by a tombstone that both participants see.
        Media tombstones keep the original URL so a later clear can still
        find the Storage object.

        Raises:
            Unauthenticated: No caller identity
            InvalidArgument: chat_id or message_id missing
            NotFound: Message or conversation does not exist
            PermissionDenied: Caller is not the sender
        """
        if not caller_uid:
            raise Unauthenticated("User must be authenticated")
        if not chat_id or not message_id:
            raise InvalidArgument("chatId and messageId are required")

        conversation = await self._get_conversation_for(chat_id, caller_uid)

        messages = MessageRepository(self.db, chat_id)
        message = await messages.get(message_id)
        if message is None:
            raise NotFound("Message not found")
        if message.sender_id != caller_uid:
            raise PermissionDenied("You can only delete your own messages")
        if message.is_deleted:
            return {"chat_id": chat_id, "message_id": message_id}

        if message.is_media and message.content:
            await self.storage_service.delete_media(message.type, message.content)

        is_text = message.type == MessageType.TEXT.value
        placeholder = DELETED_TEXT_PLACEHOLDER if is_text else DELETED_MEDIA_PLACEHOLDER

        tombstone: Dict[str, Any] = {
            "senderId": message.sender_id,
            "content": placeholder,
            "type": message.type,
            "timestamp": message.timestamp or firestore.SERVER_TIMESTAMP,
            "isDeleted": True,
            "deletedBy": caller_uid,
            "deletedAt": firestore.SERVER_TIMESTAMP,
            "originalMessageId": message_id,
            "deletedFor": list(message.deleted_for),
        }
        if message.is_media and message.content:
            tombstone["originalMediaURL"] = message.content

        tombstone_ref = messages.ref(f"{message_id}_deleted")

        batch = self.db.batch()
        batch.delete(messages.ref(message_id))
        batch.set(tombstone_ref, tombstone)

        is_last = (
            message.timestamp is not None
            and conversation.last_message_timestamp is not None
            and message.timestamp == conversation.last_message_timestamp
        )
        if is_last:
            batch.update(self.conversation_repo.ref(chat_id), {
                "lastMessage": placeholder,
                "lastMessageType": message.type,
                "lastMessageTimestamp": message.timestamp,
            })

        await batch.commit()

        logger.info(
            f"Message deleted and replaced: {message_id}",
            extra={"chat_id": chat_id, "uid": caller_uid}
        )
        return {"chat_id": chat_id, "message_id": tombstone_ref.id}

    async def list_messages(
        self,
        caller_uid: str,
        chat_id: str,
        limit: int = 50
    ) -> Tuple[List[Message], bool]:
        """
        Get the newest messages visible to the caller.

        Messages the caller cleared are filtered out after the page is read,
        so a page can hold fewer than ``limit`` messages while more remain.

        Returns:
            Tuple of (visible messages, has_more)
        """
        await self._get_conversation_for(chat_id, caller_uid)
        page = await MessageRepository(self.db, chat_id).list_recent(limit)
        has_more = len(page) >= limit
        return [m for m in page if caller_uid not in m.deleted_for], has_more
