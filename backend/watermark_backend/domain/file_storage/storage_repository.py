"""
File Storage Repository Interface

Abstract interface for physical file storage operations.
This abstraction keeps the domain layer infrastructure-agnostic by defining
contracts for file operations without depending on a specific storage
location (project directory, process temp area, ...).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import BinaryIO, List, Optional


class IFileStorageRepository(ABC):
    """
    Interface for physical file storage operations.

    Contract Guarantees:
    - File paths are relative to the storage root and contain no directories
    - delete() and exists() are idempotent and never fail on missing files
    - save() streams content and enforces an optional byte ceiling

    Implementation Requirements:
    - save(): Must not leave a partial file behind when it raises
    - get_modified_time(): Must return None for non-existent files
    - list_files(): Must return bare file names, never directories
    """

    @abstractmethod
    def save(self, file_path: str, content: BinaryIO, max_bytes: Optional[int] = None) -> int:
        """
        Save file content to storage.

        Args:
            file_path: Relative path for the file (e.g., '1704067200000_ab12....pdf')
            content: Binary file content as a file-like object
            max_bytes: Optional ceiling; exceeding it aborts the write

        Returns:
            Number of bytes written

        Raises:
            FileTooLargeError: If content exceeds max_bytes (nothing is kept)
            StorageError: If the write fails
            ValueError: If file_path is empty or escapes the storage root
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, file_path: str) -> bool:
        """
        Delete a file from storage.

        Args:
            file_path: Relative path to the file

        Returns:
            True if a file was removed, False if it did not exist

        Raises:
            StorageError: If removal fails for reasons other than absence
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, file_path: str) -> bool:
        """Check if a file exists. Never raises."""
        pass  # pragma: no cover

    @abstractmethod
    def get_modified_time(self, file_path: str) -> Optional[datetime]:
        """Last modification time (UTC), or None if the file does not exist."""
        pass  # pragma: no cover

    @abstractmethod
    def resolve_path(self, file_path: str) -> str:
        """Absolute filesystem path of a stored file."""
        pass  # pragma: no cover

    @abstractmethod
    def list_files(self) -> List[str]:
        """Names of all files under the storage root."""
        pass  # pragma: no cover
