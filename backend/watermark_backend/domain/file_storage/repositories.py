"""
File Storage Repositories

Repository interface for uploaded-file metadata and expiry records.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .entities import StoredFile


class FileRepository(ABC):
    """
    Abstract repository interface for file metadata persistence.

    Records are keyed by the generated file id. Implementations must keep the
    expiry information durable so a periodic sweep can find expired entries
    after a process restart.
    """

    @abstractmethod
    def save(self, file: StoredFile) -> bool:
        """
        Save file metadata and its expiry record.

        Args:
            file: StoredFile to save

        Returns:
            True if successful, False otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, file_id: str) -> Optional[StoredFile]:
        """
        Retrieve file metadata by exact id.

        Args:
            file_id: Generated file identifier

        Returns:
            StoredFile if found, None otherwise

        Raises:
            StorageError: If the metadata store cannot be read
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, file_id: str) -> bool:
        """
        Delete file metadata and its expiry record.

        Args:
            file_id: Generated file identifier

        Returns:
            True if a record was removed, False if none existed
        """
        pass  # pragma: no cover

    @abstractmethod
    def get_expired_files(self, now: Optional[datetime] = None) -> List[StoredFile]:
        """
        Get records whose expiry time has passed.

        Args:
            now: Reference time (default: current UTC time)

        Returns:
            List of expired StoredFile instances
        """
        pass  # pragma: no cover

    @abstractmethod
    def list_stored_names(self) -> List[str]:
        """
        Stored names of every known record, used to detect orphaned files.

        Raises:
            StorageError: If the metadata store cannot be read
        """
        pass  # pragma: no cover
