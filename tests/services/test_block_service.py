"""
Unit tests for BlockService.
"""
import pytest

from app.core.errors import Internal, InvalidArgument, Unauthenticated
from tests.fakes import ALICE, BOB


@pytest.mark.asyncio
class TestBlockUser:
    """Test blocking."""

    async def test_block_friend_with_existing_chat(self, block_service, fake_db, seed_chat):
        chat_id = seed_chat()
        fake_db.put(f"users/{ALICE}", {"friends": [BOB, "dave_uid"]})
        fake_db.put(f"users/{BOB}", {"friends": [ALICE]})

        result = await block_service.block_user(ALICE, BOB)

        assert result == {"success": True}
        alice = fake_db.data(f"users/{ALICE}")
        bob = fake_db.data(f"users/{BOB}")
        assert alice["friends"] == ["dave_uid"]
        assert alice["blockedUsers"] == [BOB]
        assert bob["friends"] == []
        assert bob["blockedByUsers"] == [ALICE]
        chat = fake_db.data(f"chat_rooms/{chat_id}")
        assert chat["chatStatus"] == {ALICE: "blocked", BOB: "blocked"}
        assert chat["lastMessage"] == "hello"
        assert len(fake_db.commits) == 1

    async def test_block_stranger_creates_blocked_chat(self, block_service, fake_db, chat_id):
        await block_service.block_user(BOB, ALICE)

        chat = fake_db.data(f"chat_rooms/{chat_id}")
        assert sorted(chat["participants"]) == [ALICE, BOB]
        assert chat["chatStatus"] == {ALICE: "blocked", BOB: "blocked"}
        assert fake_db.data(f"users/{BOB}")["blockedUsers"] == [ALICE]
        assert fake_db.data(f"users/{ALICE}")["blockedByUsers"] == [BOB]

    async def test_block_twice_keeps_single_entry(self, block_service, fake_db):
        await block_service.block_user(ALICE, BOB)
        await block_service.block_user(ALICE, BOB)

        assert fake_db.data(f"users/{ALICE}")["blockedUsers"] == [BOB]

    @pytest.mark.parametrize(
        "caller, target, error",
        [
            (None, BOB, Unauthenticated),
            (ALICE, None, InvalidArgument),
            (ALICE, "", InvalidArgument),
            (ALICE, ALICE, InvalidArgument),
        ],
    )
    async def test_invalid_calls(self, block_service, fake_db, caller, target, error):
        with pytest.raises(error):
            await block_service.block_user(caller, target)

        assert fake_db.commits == []

    async def test_store_failure_is_internal(self, block_service, fake_db):
        fake_db.fail_on_commit = 1

        with pytest.raises(Internal) as exc_info:
            await block_service.block_user(ALICE, BOB)

        assert exc_info.value.message.startswith("Failed to block user")
        assert fake_db.store == {}


@pytest.mark.asyncio
class TestUnblockUser:
    """Test unblocking."""

    async def test_unblock_restores_unadded_status(self, block_service, fake_db, seed_chat):
        chat_id = seed_chat(chatStatus={ALICE: "blocked", BOB: "blocked"})
        fake_db.put(f"users/{ALICE}", {"blockedUsers": [BOB]})
        fake_db.put(f"users/{BOB}", {"blockedByUsers": [ALICE]})

        result = await block_service.unblock_user(ALICE, BOB)

        assert result == {"success": True}
        assert fake_db.data(f"users/{ALICE}")["blockedUsers"] == []
        assert fake_db.data(f"users/{BOB}")["blockedByUsers"] == []
        chat = fake_db.data(f"chat_rooms/{chat_id}")
        assert chat["chatStatus"] == {ALICE: "unadded", BOB: "unadded"}

    async def test_unblock_friends_restores_friends_status(self, block_service, fake_db, seed_chat):
        chat_id = seed_chat(chatStatus={ALICE: "blocked", BOB: "blocked"})
        fake_db.put(f"users/{ALICE}", {"friends": [BOB], "blockedUsers": [BOB]})

        await block_service.unblock_user(ALICE, BOB)

        chat = fake_db.data(f"chat_rooms/{chat_id}")
        assert chat["chatStatus"] == {ALICE: "friends", BOB: "friends"}

    async def test_unblock_without_chat_does_not_create_one(self, block_service, fake_db, chat_id):
        await block_service.unblock_user(ALICE, BOB)

        assert fake_db.data(f"chat_rooms/{chat_id}") is None

    async def test_block_then_unblock_allows_messaging(
        self, block_service, chat_service, fake_db
    ):
        await block_service.block_user(ALICE, BOB)
        await block_service.unblock_user(ALICE, BOB)

        sent = await chat_service.send_message(BOB, ALICE, "text", "hey again")

        assert fake_db.data(f"chat_rooms/{sent['chat_id']}")["lastMessage"] == "hey again"

    async def test_invalid_call(self, block_service):
        with pytest.raises(InvalidArgument) as exc_info:
            await block_service.unblock_user(ALICE, ALICE)

        assert exc_info.value.message == "Cannot block yourself"
