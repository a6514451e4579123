"""
Storage Factory

Creates the storage repository for the configured storage mode.

Both modes use the local filesystem; they differ in directory (project
directory vs process temp area) and in retention, which UploadConfig owns.
"""

import logging
from typing import Optional

from watermark_backend.config.upload_config import UploadConfig
from watermark_backend.domain.file_storage.storage_repository import IFileStorageRepository
from watermark_backend.infrastructure.local_file_storage_repository import LocalFileStorageRepository

logger = logging.getLogger(__name__)


class StorageFactory:
    """Factory that returns a local filesystem storage repository."""

    @staticmethod
    def create_storage(config: Optional[UploadConfig] = None) -> IFileStorageRepository:
        """
        Create the storage repository.

        Args:
            config: Upload configuration, read from the environment if None

        Returns:
            Local IFileStorageRepository implementation

        Raises:
            RuntimeError: If the storage directory cannot be initialized
        """
        if config is None:
            config = UploadConfig()

        try:
            storage = LocalFileStorageRepository(config.upload_dir)
        except Exception as e:
            raise RuntimeError(f"Failed to initialize local storage: {e}") from e

        logger.info(
            "Storage factory: using %s storage at %s (retention %s)",
            config.storage_mode,
            storage.base_path,
            config.retention,
        )
        return storage
