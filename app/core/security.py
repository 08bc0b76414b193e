"""
Security utilities for authentication.
Verifies Firebase ID tokens presented by mobile clients.
"""
import logging
from typing import Any, Dict

from fastapi.concurrency import run_in_threadpool
from firebase_admin import auth

from app.core.errors import Unauthenticated
from app.core.firebase import init_firebase

logger = logging.getLogger(__name__)


class SecurityException(Unauthenticated):
    """Raised when the caller's credentials cannot be verified."""
    pass


def extract_token_from_header(authorization: str) -> str:
    """
    Extract ID token from Authorization header.

    Args:
        authorization: Authorization header value (e.g., "Bearer <token>")

    Returns:
        Extracted token

    Raises:
        SecurityException: If header format is invalid

    Example:
        ```python
        token = extract_token_from_header("Bearer eyJhbG...")
        ```
    """
    if not authorization:
        raise SecurityException("Missing authorization header")

    parts = authorization.split()

    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise SecurityException("Invalid authorization header format")

    return parts[1]


async def verify_id_token(token: str) -> Dict[str, Any]:
    """
    Verify a Firebase ID token and return its decoded claims.

    Args:
        token: ID token issued by Firebase Auth

    Returns:
        Decoded claims; the caller's identity is under "uid"

    Raises:
        SecurityException: If token is expired, revoked or invalid
    """
    app = init_firebase()
    try:
        return await run_in_threadpool(auth.verify_id_token, token, app)
    except auth.ExpiredIdTokenError:
        raise SecurityException("Token has expired")
    except auth.RevokedIdTokenError:
        raise SecurityException("Token has been revoked")
    except (auth.InvalidIdTokenError, ValueError) as e:
        logger.info("Rejected ID token: %s", e)
        raise SecurityException("Invalid token")
