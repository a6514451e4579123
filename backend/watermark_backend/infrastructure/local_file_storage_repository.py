"""
Local File Storage Repository Implementation

Concrete implementation of IFileStorageRepository for the local filesystem.
All files live flat in one directory; names are generated by the domain, so
no sub-directories are created.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, List, Optional

from watermark_backend.domain.errors import FileTooLargeError, StorageError
from watermark_backend.domain.file_storage.storage_repository import IFileStorageRepository

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class LocalFileStorageRepository(IFileStorageRepository):
    """
    Local filesystem implementation of IFileStorageRepository.

    Writes go to a ``.part`` file first and are renamed into place once
    complete, so readers never see a half-written upload.

    Attributes:
        base_path: Directory holding the stored files
    """

    def __init__(self, base_path: str = "uploads"):
        """
        Initialize the local file storage repository.

        Args:
            base_path: Storage directory, created if missing
        """
        self.base_path = Path(base_path).resolve()
        self._ensure_base_directory()

    def _ensure_base_directory(self) -> None:
        """
        Ensure the storage directory exists.

        Raises:
            StorageError: If the directory cannot be created
        """
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to create storage directory: {self.base_path}", e
            ) from e

    def _full_path(self, file_path: str) -> Path:
        if not file_path or not file_path.strip():
            raise ValueError("file_path cannot be empty")

        full_path = (self.base_path / file_path).resolve()
        if full_path.parent != self.base_path:
            raise ValueError(f"file_path escapes storage directory: {file_path}")
        return full_path

    # IFileStorageRepository interface methods

    def save(self, file_path: str, content: BinaryIO, max_bytes: Optional[int] = None) -> int:
        """
        Stream content to disk, enforcing max_bytes.

        Returns:
            Number of bytes written

        Raises:
            FileTooLargeError: If more than max_bytes arrive; nothing is kept
            StorageError: If the write fails
            ValueError: If file_path is empty or invalid
        """
        full_path = self._full_path(file_path)
        part_path = full_path.with_name(full_path.name + ".part")

        written = 0
        try:
            with open(part_path, "wb") as f:
                while True:
                    chunk = content.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if max_bytes is not None and written > max_bytes:
                        raise FileTooLargeError(max_bytes, written)
                    f.write(chunk)
            part_path.replace(full_path)
        except FileTooLargeError:
            part_path.unlink(missing_ok=True)
            raise
        except OSError as e:
            part_path.unlink(missing_ok=True)
            raise StorageError(f"Failed to save file: {e}", e) from e

        return written

    def delete(self, file_path: str) -> bool:
        """
        Delete a file from storage.

        Returns:
            True if a file was removed, False if nothing was there
        """
        try:
            full_path = self._full_path(file_path)
        except ValueError:
            return False

        try:
            full_path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete file: {e}", e) from e

    def exists(self, file_path: str) -> bool:
        try:
            return self._full_path(file_path).is_file()
        except (OSError, ValueError):
            return False

    def get_modified_time(self, file_path: str) -> Optional[datetime]:
        try:
            mtime = self._full_path(file_path).stat().st_mtime
        except (OSError, ValueError):
            return None
        return datetime.fromtimestamp(mtime, tz=timezone.utc)

    def resolve_path(self, file_path: str) -> str:
        return str(self._full_path(file_path))

    def list_files(self) -> List[str]:
        try:
            return sorted(p.name for p in self.base_path.iterdir() if p.is_file())
        except OSError as e:
            logger.warning("Could not list storage directory %s: %s", self.base_path, e)
            return []
