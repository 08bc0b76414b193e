"""
Dependency injection for FastAPI routes.
Provides reusable dependencies for authentication and service construction.
"""
from typing import Optional

from fastapi import Depends, Header
from google.cloud.firestore import AsyncClient
from google.cloud.storage import Bucket

from app.core.errors import Unauthenticated
from app.core.firebase import get_bucket, get_firestore
from app.core.security import extract_token_from_header, verify_id_token
from app.services.block_service import BlockService
from app.services.chat_service import ChatService
from app.services.storage_service import StorageService


async def get_current_uid_optional(
    authorization: Optional[str] = Header(None)
) -> Optional[str]:
    """
    Dependency to optionally get the caller's uid.

    Callables receive None when no Authorization header is sent and let the
    service reject the call, matching how a Cloud Function sees
    ``request.auth`` as unset. A header that is present but invalid is still
    rejected here.

    Args:
        authorization: Authorization header containing Bearer ID token

    Returns:
        Firebase uid or None if no credentials were presented
    """
    if not authorization:
        return None

    token = extract_token_from_header(authorization)
    claims = await verify_id_token(token)
    return claims.get("uid") or claims.get("sub")


async def get_current_uid(
    uid: Optional[str] = Depends(get_current_uid_optional)
) -> str:
    """
    Dependency to get the authenticated caller's uid.

    Raises:
        Unauthenticated: 401 if no valid ID token is provided

    Example:
        ```python
        @router.get("/protected")
        async def protected_route(uid: str = Depends(get_current_uid)):
            return {"uid": uid}
        ```
    """
    if not uid:
        raise Unauthenticated("User must be authenticated")
    return uid


def get_storage_service(bucket: Bucket = Depends(get_bucket)) -> StorageService:
    """Dependency for the media storage cleanup service."""
    return StorageService(bucket)


def get_chat_service(
    db: AsyncClient = Depends(get_firestore),
    storage_service: StorageService = Depends(get_storage_service)
) -> ChatService:
    """Dependency for the chat service."""
    return ChatService(db, storage_service)


def get_block_service(db: AsyncClient = Depends(get_firestore)) -> BlockService:
    """Dependency for the block service."""
    return BlockService(db)


def get_pagination_limit(limit: int = 50) -> int:
    """
    Dependency for message page size.

    Args:
        limit: Number of items to return (default: 50, max: 100)

    Returns:
        Clamped limit
    """
    if limit > 100:
        limit = 100
    elif limit < 1:
        limit = 1
    return limit
