"""
Pytest configuration and fixtures for tests.
Provides in-memory Firestore/Storage, services, seeded chats and HTTP clients.
"""
import pytest
from typing import AsyncGenerator, Callable, List, Optional
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.api.v1 import functions
from app.core.firebase import get_bucket, get_firestore
from app.dependencies import get_current_uid_optional
from app.models.conversation import chat_room_id
from app.services.block_service import BlockService
from app.services.chat_service import ChatService
from app.services.storage_service import StorageService
from tests.fakes import ALICE, BOB, FakeBucket, FakeFirestore


@pytest.fixture
def fake_db() -> FakeFirestore:
    """Empty in-memory Firestore."""
    return FakeFirestore()


@pytest.fixture
def fake_bucket() -> FakeBucket:
    """Empty in-memory Storage bucket."""
    return FakeBucket()


@pytest.fixture
def storage_service(fake_bucket) -> StorageService:
    return StorageService(fake_bucket)


@pytest.fixture
def chat_service(fake_db, storage_service) -> ChatService:
    return ChatService(fake_db, storage_service)


@pytest.fixture
def block_service(fake_db) -> BlockService:
    return BlockService(fake_db)


@pytest.fixture
def chat_id() -> str:
    return chat_room_id(ALICE, BOB)


@pytest.fixture
def seed_chat(fake_db, chat_id) -> Callable:
    """Create the alice/bob conversation with a non-empty preview."""
    def _seed(participants: Optional[List[str]] = None, **fields) -> str:
        data = {
            "participants": participants if participants is not None else [ALICE, BOB],
            "lastMessage": "hello",
            "lastMessageType": "text",
            "lastMessageTimestamp": fake_db.now(),
            "unreadCount": {ALICE: 0, BOB: 1},
            "chatStatus": {ALICE: "friends", BOB: "friends"},
        }
        data.update(fields)
        fake_db.put(f"chat_rooms/{chat_id}", data)
        return chat_id
    return _seed


@pytest.fixture
def seed_message(fake_db, chat_id) -> Callable:
    """Add one message to the alice/bob conversation."""
    def _seed(
        message_id: str,
        sender: str = ALICE,
        type: str = "text",
        content: str = "hi",
        deleted_for: Optional[List[str]] = None,
        **fields
    ) -> str:
        data = {
            "senderId": sender,
            "type": type,
            "content": content,
            "timestamp": fake_db.now(),
            "isDeleted": False,
            "deletedFor": deleted_for or [],
        }
        data.update(fields)
        fake_db.put(f"chat_rooms/{chat_id}/messages/{message_id}", data)
        return message_id
    return _seed


@pytest.fixture
def message_path(chat_id) -> Callable[[str], str]:
    return lambda message_id: f"chat_rooms/{chat_id}/messages/{message_id}"


@pytest.fixture(autouse=True)
def disable_rate_limit():
    """Rate limiting is keyed on the test client's address; turn it off."""
    functions.limiter.enabled = False
    yield
    functions.limiter.enabled = True


def _override_storage(fake_db, fake_bucket):
    app.dependency_overrides[get_firestore] = lambda: fake_db
    app.dependency_overrides[get_bucket] = lambda: fake_bucket


@pytest.fixture(scope="function")
async def client(fake_db, fake_bucket) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client authenticated as alice."""
    _override_storage(fake_db, fake_bucket)

    async def override_uid():
        return ALICE

    app.dependency_overrides[get_current_uid_optional] = override_uid

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    # Clear overrides after test
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def unauth_client(fake_db, fake_bucket) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client WITHOUT authentication (for testing unauthorized access)."""
    _override_storage(fake_db, fake_bucket)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
