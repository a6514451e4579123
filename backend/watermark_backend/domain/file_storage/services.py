"""
File Storage Services

Domain service for uploaded file management.
"""

import logging
from datetime import datetime, timedelta
from typing import BinaryIO, Optional

from ..errors import (
    DomainError,
    ErrorCategory,
    FileTooLargeError,
    NoFileProvidedError,
    StorageError,
    UnsupportedFileTypeError,
)
from .entities import StoredFile, utcnow
from .repositories import FileRepository
from .storage_repository import IFileStorageRepository
from .value_objects import MAX_UPLOAD_BYTES, StoredName, is_allowed_mime_type

logger = logging.getLogger(__name__)


class FileNotFoundError(DomainError):
    """Raised when no live upload exists for an id."""

    category = ErrorCategory.FILE_NOT_FOUND


class FileManager:
    """
    Domain service for managing uploaded files.

    Coordinates validation, physical storage and the id-keyed metadata
    records, and runs the expiry sweep.
    """

    def __init__(
        self,
        file_repository: FileRepository,
        storage_repository: IFileStorageRepository,
        retention: timedelta = timedelta(hours=24),
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ):
        """
        Initialize FileManager with repositories.

        Args:
            file_repository: Repository for file metadata and expiry records
            storage_repository: Repository for the file bytes
            retention: How long uploads are kept
            max_upload_bytes: Upload size ceiling
        """
        self.file_repo = file_repository
        self.storage_repo = storage_repository
        self.retention = retention
        self.max_upload_bytes = max_upload_bytes

    def validate_upload(
        self, original_name: Optional[str], mime_type: Optional[str], content_length: Optional[int] = None
    ) -> None:
        """
        Validate upload metadata before any byte is written.

        Raises:
            NoFileProvidedError: If no filename was supplied
            UnsupportedFileTypeError: If the mime type is not allowed
            FileTooLargeError: If the declared length exceeds the ceiling
        """
        if not original_name:
            raise NoFileProvidedError("No file uploaded")

        if not is_allowed_mime_type(mime_type):
            raise UnsupportedFileTypeError(mime_type or "unknown")

        if content_length is not None and content_length > self.max_upload_bytes:
            raise FileTooLargeError(self.max_upload_bytes, content_length)

    def upload(
        self,
        content: BinaryIO,
        original_name: Optional[str],
        mime_type: Optional[str],
        content_length: Optional[int] = None,
    ) -> StoredFile:
        """
        Validate, persist and register an uploaded file.

        Args:
            content: Binary stream of the upload
            original_name: Client-supplied filename
            mime_type: Declared media type
            content_length: Declared size in bytes, if known

        Returns:
            StoredFile entity for the new upload

        Raises:
            NoFileProvidedError, UnsupportedFileTypeError, FileTooLargeError:
                when validation fails (nothing is persisted)
            StorageError: If bytes or metadata cannot be written
        """
        self.validate_upload(original_name, mime_type, content_length)

        stored_name = StoredName.generate(original_name)
        size = self.storage_repo.save(str(stored_name), content, max_bytes=self.max_upload_bytes)

        file = StoredFile.create(
            stored_name=stored_name,
            original_name=original_name,
            size_bytes=size,
            mime_type=mime_type,
            storage_path=self.storage_repo.resolve_path(str(stored_name)),
            retention=self.retention,
        )

        if not self.file_repo.save(file):
            self.storage_repo.delete(file.stored_name)
            raise StorageError("Failed to save file metadata")

        logger.info(
            "Stored upload %s (%s, %d bytes) as %s",
            original_name,
            mime_type,
            size,
            file.stored_name,
        )
        return file

    def get_file(self, file_id: str) -> StoredFile:
        """
        Retrieve a live upload by id.

        Expired records and records whose bytes have vanished are removed and
        reported as not found.

        Raises:
            FileNotFoundError: If no live upload exists for the id
            StorageError: If the metadata store cannot be read
        """
        file = self.file_repo.get(file_id)

        if file is None:
            raise FileNotFoundError(f"File not found: {file_id}")

        if file.is_expired():
            self._remove(file)
            raise FileNotFoundError(f"File not found: {file_id}")

        if not self.storage_repo.exists(file.stored_name):
            logger.warning("Upload %s has a record but no bytes on disk", file_id)
            self.file_repo.delete(file_id)
            raise FileNotFoundError(f"File not found: {file_id}")

        return file

    def delete_file(self, file_id: str) -> StoredFile:
        """
        Delete an upload immediately.

        An expired record that the sweep has not reached yet is removed and
        reported as not found, matching get_file.

        Raises:
            FileNotFoundError: If no live record exists for the id
            StorageError: If the metadata store cannot be read
        """
        file = self.file_repo.get(file_id)
        if file is None:
            raise FileNotFoundError(f"File not found: {file_id}")

        if file.is_expired():
            self._remove(file)
            raise FileNotFoundError(f"File not found: {file_id}")

        self._remove(file)
        logger.info("Deleted upload %s", file.stored_name)
        return file

    def cleanup_expired_files(self, now: Optional[datetime] = None) -> int:
        """
        Delete expired uploads.

        Removes both the bytes and the record. Per-file failures are logged
        and skipped.

        Returns:
            Number of files cleaned up
        """
        expired_files = self.file_repo.get_expired_files(now)

        count = 0
        for file in expired_files:
            try:
                self._remove(file)
                count += 1
                logger.info("Removed expired upload %s", file.stored_name)
            except StorageError as e:
                logger.warning("Error cleaning up upload %s: %s", file.id, e)

        return count

    def cleanup_orphaned_files(self, max_age: timedelta = timedelta(hours=1)) -> int:
        """
        Delete stored files that have no metadata record.

        Only files older than max_age are touched so in-flight uploads, whose
        record is written after the bytes, are left alone.

        Returns:
            Number of files removed

        Raises:
            StorageError: If the record listing cannot be read. Nothing is
                deleted in that case.
        """
        known = set(self.file_repo.list_stored_names())
        cutoff = utcnow() - max_age

        count = 0
        for name in self.storage_repo.list_files():
            if name in known:
                continue

            modified = self.storage_repo.get_modified_time(name)
            if modified is None or modified > cutoff:
                continue

            try:
                if self.storage_repo.delete(name):
                    count += 1
                    logger.info("Removed orphaned file %s", name)
            except StorageError as e:
                logger.warning("Failed to remove orphaned file %s: %s", name, e)

        return count

    def _remove(self, file: StoredFile) -> None:
        # A missing file is fine here; the record is dropped either way.
        self.storage_repo.delete(file.stored_name)
        self.file_repo.delete(file.id)
