"""
Cloud Storage integration for chat media.

Resolves public download URLs back to object paths and deletes the objects
when the messages that reference them go away. Cleanup is best-effort: a
failed delete is logged and never propagates to the caller.
"""
import logging
from typing import Iterable, Optional, Tuple
from urllib.parse import unquote, urlparse

from fastapi.concurrency import run_in_threadpool
from google.cloud.storage import Bucket

from app.config import settings
from app.models.message import MEDIA_TYPES, looks_like_url

logger = logging.getLogger(__name__)


def resolve_storage_path(url: str, storage_host: Optional[str] = None) -> Optional[str]:
    """
    Extract the object path from a Storage download URL.

    Download URLs look like
    ``https://firebasestorage.googleapis.com/v0/b/<bucket>/o/<encoded path>?alt=media``;
    the segment after ``o`` is the URL-encoded object path.

    Args:
        url: Candidate download URL
        storage_host: Host to match (defaults to settings.storage_host)

    Returns:
        Decoded object path, or None if the URL does not point at Storage
    """
    host = storage_host or settings.storage_host
    parsed = urlparse(url)

    if parsed.scheme not in ("http", "https"):
        return None
    if not parsed.hostname or host not in parsed.hostname:
        return None

    components = parsed.path.split("/")
    if "o" not in components:
        return None

    index = components.index("o")
    if index + 1 >= len(components) or not components[index + 1]:
        return None

    return unquote(components[index + 1])


class StorageService:
    """Service for removing chat media from Cloud Storage."""

    def __init__(self, bucket: Bucket, storage_host: Optional[str] = None):
        """
        Initialize storage service.

        Args:
            bucket: Bucket holding chat media
            storage_host: Host of download URLs (defaults to settings.storage_host)
        """
        self.bucket = bucket
        self.storage_host = storage_host or settings.storage_host

    async def delete_media(self, message_type: str, url: Optional[str]) -> bool:
        """
        Delete the Storage object behind a media message.

        Only image, video and photo messages whose reference is an http(s)
        URL are considered. Every failure is logged and swallowed.

        Args:
            message_type: Message type
            url: Media reference (download URL)

        Returns:
            True if an object was deleted
        """
        if message_type not in MEDIA_TYPES:
            return False
        if not looks_like_url(url) or not url.strip():
            return False

        try:
            path = resolve_storage_path(url, self.storage_host)
            if not path:
                logger.debug(f"Not a Storage URL, skipping cleanup: {url}")
                return False

            blob = self.bucket.blob(path)
            await run_in_threadpool(blob.delete)
            logger.info(f"Deleted media file from Storage: {path}")
            return True

        except Exception as e:
            logger.warning(
                f"Error deleting media file: {e}",
                extra={"message_type": message_type, "url": url}
            )
            return False

    async def delete_many(self, items: Iterable[Tuple[str, Optional[str]]]) -> int:
        """
        Delete media for several messages, one at a time.

        Args:
            items: (message_type, media_reference) pairs

        Returns:
            Number of objects deleted
        """
        deleted = 0
        for message_type, url in items:
            if await self.delete_media(message_type, url):
                deleted += 1
        return deleted
