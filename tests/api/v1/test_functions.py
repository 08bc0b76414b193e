"""
Integration tests for the callable function endpoints.
Tests the callable envelope, error mapping and end-to-end clear behaviour.
"""
import pytest

from app.core.security import SecurityException
from tests.fakes import ALICE, BOB, storage_url


@pytest.mark.asyncio
class TestClearChatAPI:
    """Test the clearChat callable."""

    async def test_clear_chat_success(self, client, fake_db, seed_chat, seed_message, message_path):
        """Test clearing a chat returns the callable success envelope."""
        chat_id = seed_chat()
        seed_message("m1")
        seed_message("m2", sender=BOB, deleted_for=[BOB])

        response = await client.post(
            "/api/v1/functions/clearChat",
            json={"data": {"chatId": chat_id}}
        )

        assert response.status_code == 200
        assert response.json() == {"result": {"success": True}}
        assert fake_db.data(message_path("m1"))["deletedFor"] == [ALICE]
        assert fake_db.data(message_path("m2")) is None
        assert fake_db.data(f"chat_rooms/{chat_id}")["lastMessage"] == ""

    async def test_clear_chat_unauthenticated(self, unauth_client, fake_db, seed_chat, seed_message):
        """Test clearing without credentials leaves the chat untouched."""
        chat_id = seed_chat()
        seed_message("m1")

        response = await unauth_client.post(
            "/api/v1/functions/clearChat",
            json={"data": {"chatId": chat_id}}
        )

        assert response.status_code == 401
        assert response.json() == {
            "error": {"status": "UNAUTHENTICATED", "message": "User must be authenticated"}
        }
        assert fake_db.commits == []

    async def test_clear_chat_invalid_token(self, unauth_client, mocker):
        """Test a bad ID token is rejected before the service runs."""
        mocker.patch(
            "app.dependencies.verify_id_token",
            side_effect=SecurityException("Invalid token")
        )

        response = await unauth_client.post(
            "/api/v1/functions/clearChat",
            headers={"Authorization": "Bearer not-a-token"},
            json={"data": {"chatId": "alice_uid_bob_uid"}}
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid token"

    async def test_clear_chat_verified_token(self, unauth_client, fake_db, seed_chat, seed_message, mocker):
        """Test the uid comes from the verified token claims."""
        mocker.patch("app.dependencies.verify_id_token", return_value={"uid": BOB})
        chat_id = seed_chat()
        seed_message("m1")

        response = await unauth_client.post(
            "/api/v1/functions/clearChat",
            headers={"Authorization": "Bearer good-token"},
            json={"data": {"chatId": chat_id}}
        )

        assert response.status_code == 200
        assert fake_db.data(f"chat_rooms/{chat_id}/messages/m1")["deletedFor"] == [BOB]

    async def test_clear_chat_missing_chat_id(self, client):
        """Test an empty payload maps to INVALID_ARGUMENT."""
        response = await client.post("/api/v1/functions/clearChat", json={"data": {}})

        assert response.status_code == 400
        assert response.json() == {
            "error": {"status": "INVALID_ARGUMENT", "message": "chatId is required"}
        }

    async def test_clear_chat_missing_envelope(self, client):
        """Test a body without the data envelope is rejected."""
        response = await client.post("/api/v1/functions/clearChat", json={"chatId": "x"})

        assert response.status_code == 400
        assert response.json()["error"]["status"] == "INVALID_ARGUMENT"

    async def test_clear_chat_not_found(self, client):
        response = await client.post(
            "/api/v1/functions/clearChat",
            json={"data": {"chatId": "alice_uid_nobody"}}
        )

        assert response.status_code == 404
        assert response.json()["error"]["status"] == "NOT_FOUND"

    async def test_clear_chat_invalid_participants(self, client, seed_chat):
        chat_id = seed_chat(participants=[ALICE])

        response = await client.post(
            "/api/v1/functions/clearChat",
            json={"data": {"chatId": chat_id}}
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": {"status": "FAILED_PRECONDITION", "message": "Invalid chat room participants"}
        }

    async def test_clear_chat_store_failure(self, client, fake_db, seed_chat, seed_message):
        """Test a failed commit surfaces as INTERNAL."""
        chat_id = seed_chat()
        seed_message("m1")
        fake_db.fail_on_commit = 1

        response = await client.post(
            "/api/v1/functions/clearChat",
            json={"data": {"chatId": chat_id}}
        )

        assert response.status_code == 500
        assert response.json() == {
            "error": {"status": "INTERNAL", "message": "Failed to clear chat: simulated commit failure"}
        }

    async def test_clear_chat_malformed_chat_room(self, client, seed_chat):
        """Test an unreadable chat room still answers in the callable envelope."""
        chat_id = seed_chat(lastMessageTimestamp=["bad"])

        response = await client.post(
            "/api/v1/functions/clearChat",
            json={"data": {"chatId": chat_id}}
        )

        assert response.status_code == 500
        assert response.json() == {
            "error": {"status": "INTERNAL", "message": "Invalid chat room data"}
        }

    async def test_clear_chat_removes_media(self, client, fake_bucket, seed_chat, seed_message):
        chat_id = seed_chat()
        fake_bucket.objects.add("chat_media/x.jpg")
        seed_message("m1", sender=BOB, type="image",
                     content=storage_url("chat_media/x.jpg"), deleted_for=[BOB])

        response = await client.post(
            "/api/v1/functions/clearChat",
            json={"data": {"chatId": chat_id}}
        )

        assert response.status_code == 200
        assert fake_bucket.objects == set()


@pytest.mark.asyncio
class TestMessageFunctionsAPI:
    """Test the sendMessage and deleteMessage callables."""

    async def test_send_message(self, client, fake_db, chat_id):
        response = await client.post(
            "/api/v1/functions/sendMessage",
            json={"data": {"recipientUid": BOB, "content": "Hi Bob"}}
        )

        assert response.status_code == 200
        result = response.json()["result"]
        assert result["success"] is True
        assert result["chatId"] == chat_id
        message = fake_db.data(f"chat_rooms/{chat_id}/messages/{result['messageId']}")
        assert message["content"] == "Hi Bob"
        assert message["type"] == "text"

    async def test_send_message_blank_content(self, client):
        response = await client.post(
            "/api/v1/functions/sendMessage",
            json={"data": {"recipientUid": BOB, "content": "   "}}
        )

        assert response.status_code == 400
        assert response.json()["error"]["status"] == "INVALID_ARGUMENT"

    async def test_send_message_unknown_type(self, client):
        response = await client.post(
            "/api/v1/functions/sendMessage",
            json={"data": {"recipientUid": BOB, "type": "sticker", "content": "x"}}
        )

        assert response.status_code == 400

    async def test_delete_message(self, client, fake_db, seed_chat, seed_message, message_path):
        chat_id = seed_chat()
        seed_message("m1")

        response = await client.post(
            "/api/v1/functions/deleteMessage",
            json={"data": {"chatId": chat_id, "messageId": "m1"}}
        )

        assert response.status_code == 200
        assert response.json() == {"result": {"success": True}}
        assert fake_db.data(message_path("m1_deleted"))["isDeleted"] is True

    async def test_delete_other_users_message(self, client, seed_chat, seed_message):
        chat_id = seed_chat()
        seed_message("m1", sender=BOB)

        response = await client.post(
            "/api/v1/functions/deleteMessage",
            json={"data": {"chatId": chat_id, "messageId": "m1"}}
        )

        assert response.status_code == 403
        assert response.json()["error"]["status"] == "PERMISSION_DENIED"


@pytest.mark.asyncio
class TestBlockFunctionsAPI:
    """Test the blockUser and unblockUser callables."""

    async def test_block_and_unblock(self, client, fake_db, chat_id):
        response = await client.post(
            "/api/v1/functions/blockUser",
            json={"data": {"blockedUid": BOB}}
        )

        assert response.status_code == 200
        assert response.json() == {"result": {"success": True}}
        assert fake_db.data(f"chat_rooms/{chat_id}")["chatStatus"][ALICE] == "blocked"

        send = await client.post(
            "/api/v1/functions/sendMessage",
            json={"data": {"recipientUid": BOB, "content": "hello?"}}
        )
        assert send.status_code == 400
        assert send.json()["error"]["status"] == "FAILED_PRECONDITION"

        response = await client.post(
            "/api/v1/functions/unblockUser",
            json={"data": {"blockedUid": BOB}}
        )

        assert response.status_code == 200
        assert fake_db.data(f"chat_rooms/{chat_id}")["chatStatus"][ALICE] == "unadded"

    async def test_block_self(self, client):
        response = await client.post(
            "/api/v1/functions/blockUser",
            json={"data": {"blockedUid": ALICE}}
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Cannot block yourself"
