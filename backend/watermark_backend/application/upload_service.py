"""
Upload Service

Application service behind the upload endpoints. Delegates storage rules to
FileManager and shapes the JSON payloads the frontend expects.
"""

import logging
from datetime import datetime, timezone
from typing import Any, BinaryIO, Dict, Optional

from watermark_backend.config.upload_config import UploadConfig
from watermark_backend.domain.file_storage import FileManager, FileNotFoundError, StoredFile
from watermark_backend.domain.file_storage.value_objects import InvalidStoredNameError, StoredName

logger = logging.getLogger(__name__)


def to_iso(moment: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a ``Z`` suffix."""
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class UploadService:
    """Orchestrates upload, lookup, deletion and cleanup of uploaded files."""

    def __init__(self, file_manager: FileManager, config: UploadConfig):
        self.file_manager = file_manager
        self.config = config

    def public_base_url(self, request_base_url: str) -> str:
        return (self.config.public_base_url or request_base_url).rstrip("/")

    def upload(
        self,
        content: BinaryIO,
        original_name: Optional[str],
        mime_type: Optional[str],
        request_base_url: str,
        content_length: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Store an upload and describe it.

        Raises:
            UploadValidationError subclasses, StorageError
        """
        file = self.file_manager.upload(content, original_name, mime_type, content_length)
        file_url = file.public_url(self.public_base_url(request_base_url))

        logger.info("File uploaded: %s -> %s", original_name, file_url)

        return {
            "success": True,
            "fileId": file.id,
            "fileUrl": file_url,
            "fileName": file.original_name,
            "fileSize": file.size_bytes,
            "mimetype": file.mime_type,
            "uploadTime": to_iso(file.created_at),
            "expiresAt": to_iso(file.expires_at),
        }

    def get_file_info(self, file_id: str, request_base_url: str) -> Dict[str, Any]:
        """
        Describe a live upload.

        Raises:
            FileNotFoundError: If the id is unknown or expired
        """
        file = self.file_manager.get_file(file_id)
        return {
            "success": True,
            "fileId": file.id,
            "filename": file.stored_name,
            "publicUrl": file.public_url(self.public_base_url(request_base_url)),
            "size": file.size_bytes,
            "uploadTime": to_iso(file.created_at),
            "expiresAt": to_iso(file.expires_at),
            "exists": True,
        }

    def delete_file(self, file_id: str) -> Dict[str, Any]:
        """
        Raises:
            FileNotFoundError: If the id is unknown
        """
        self.file_manager.delete_file(file_id)
        return {"success": True, "message": "File deleted successfully"}

    def resolve_public_file(self, stored_name: str) -> StoredFile:
        """
        Find the live upload served under /files/<stored_name>.

        Raises:
            FileNotFoundError: If the name is malformed, unknown or expired
            StorageError: If the metadata store cannot be read
        """
        try:
            name = StoredName(stored_name)
        except InvalidStoredNameError:
            raise FileNotFoundError(f"File not found: {stored_name}")

        file = self.file_manager.get_file(name.file_id)
        if file.stored_name != stored_name:
            raise FileNotFoundError(f"File not found: {stored_name}")
        return file
