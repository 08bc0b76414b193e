"""
Firebase Admin initialization and client dependencies.
Provides the async Firestore client and the media Storage bucket.
"""
import logging

import firebase_admin
from firebase_admin import credentials, firestore_async, storage
from google.cloud.firestore import AsyncClient
from google.cloud.storage import Bucket

from app.config import settings

logger = logging.getLogger(__name__)


def init_firebase() -> firebase_admin.App:
    """
    Initialize the default Firebase app once.

    Uses the service account file from settings when configured, otherwise
    application default credentials (Cloud Run, GCE, local gcloud login).

    Returns:
        The default Firebase app
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    options = {}
    if settings.firebase_project_id:
        options["projectId"] = settings.firebase_project_id
    if settings.firebase_storage_bucket:
        options["storageBucket"] = settings.firebase_storage_bucket

    if settings.firebase_credentials_path:
        cred = credentials.Certificate(settings.firebase_credentials_path)
    else:
        cred = credentials.ApplicationDefault()

    app = firebase_admin.initialize_app(cred, options or None)
    logger.info("Firebase app initialized", extra={"project_id": settings.firebase_project_id})
    return app


def get_firestore() -> AsyncClient:
    """
    Dependency for getting the async Firestore client.

    Example:
        ```python
        @router.get("/chats/{chat_id}")
        async def get_chat(chat_id: str, db: AsyncClient = Depends(get_firestore)):
            snapshot = await db.collection("chat_rooms").document(chat_id).get()
        ```
    """
    return firestore_async.client(init_firebase())


def get_bucket() -> Bucket:
    """Dependency for getting the media Storage bucket."""
    return storage.bucket(app=init_firebase())
