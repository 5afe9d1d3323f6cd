"""
Document storage access.

Event documents live in a private Supabase Storage bucket and are only ever
handed out as signed URLs.
"""

import logging

from supabase import Client

from shared.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class DocumentStorage:
    """Signed URL generation for the event documents bucket."""

    def __init__(self, db: Client, bucket: str):
        self._db = db
        self._bucket = bucket

    def object_path(self, file_path: str) -> str:
        """
        Path of a stored file inside the bucket.

        Uploads record file_path with the bucket name in front
        ("event-documents/<file>"), which the storage API does not expect.
        """
        prefix = f"{self._bucket}/"
        path = file_path.lstrip("/")
        if path.startswith(prefix):
            return path[len(prefix):]
        return path

    def create_signed_url(self, file_path: str, expires_in: int) -> str:
        """
        Create a time-limited download URL.

        Raises:
            ExternalServiceError: If storage refuses to sign the path
        """
        path = self.object_path(file_path)
        try:
            response = self._db.storage.from_(self._bucket).create_signed_url(path, expires_in)
        except Exception as e:
            # storage3 error classes differ between releases
            logger.error(f"Failed to sign {self._bucket}/{path}: {e}")
            raise ExternalServiceError(
                "Failed to create document URL",
                service="storage",
                code="STORAGE_ERROR",
                details={"message": str(e)},
            ) from e

        url = response.get("signedURL") or response.get("signedUrl")
        if not url:
            raise ExternalServiceError(
                "Failed to create document URL",
                service="storage",
                code="STORAGE_ERROR",
                details={"message": "Storage returned no URL"},
            )
        return url
