# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles profile image upload with Supabase Storage.
# Size and type checks happen in the router before anything is uploaded.
# =============================================================================

import logging
import mimetypes
from uuid import UUID, uuid4

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid
from app.exceptions import StorageUploadError

logger = logging.getLogger(__name__)

# Storage bucket name
BUCKET_NAME = "avatars"


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading profile images and resolving their public URLs.
    """

    @staticmethod
    def build_avatar_path(user_id: str | UUID, content_type: str) -> str:
        """
        Build a unique storage path for a user's image.

        Example:
            build_avatar_path(uid, "image/png")  # "users/<uid>/<random>.png"
        """
        extension = mimetypes.guess_extension(content_type) or ""
        if extension == ".jpe":
            extension = ".jpg"
        return f"users/{normalize_uuid(user_id)}/{uuid4().hex}{extension}"

    @staticmethod
    def upload_avatar(
        user_id: str | UUID,
        content: bytes,
        content_type: str,
    ) -> str:
        """
        Upload a profile image to storage.

        Args:
            user_id: Owner of the image
            content: Image bytes
            content_type: MIME type (already validated)

        Returns:
            Storage path where the image was uploaded

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()
        path = StorageService.build_avatar_path(user_id, content_type)

        try:
            client.storage.from_(BUCKET_NAME).upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "true"}
            )

            logger.info(f"Uploaded avatar to storage: {path}")
            return path

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def get_public_url(storage_path: str) -> str:
        """
        Get a public URL for a storage file.

        Args:
            storage_path: Path in storage bucket

        Returns:
            Public URL string
        """
        client = SupabaseClient.get_client()

        try:
            return client.storage.from_(BUCKET_NAME).get_public_url(storage_path)
        except Exception as e:
            logger.error(f"Failed to get public URL: {e}")
            raise StorageUploadError(str(e))
