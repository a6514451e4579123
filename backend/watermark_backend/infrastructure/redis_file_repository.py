"""
Redis File Repository Implementation

Concrete Redis-based implementation of FileRepository.

Layout:
- ``file:{id}``       -> StoredFile JSON (no TTL; the sweep removes it)
- ``file_expiry``     -> sorted set of ids scored by expires_at (epoch seconds)

Keeping records without a TTL means an expired record is still around when
the sweep runs, so the physical file can be found and deleted too.

Reads raise StorageError when Redis is unreachable; None and empty lists
only ever mean the data is absent.
"""

import logging
from datetime import datetime
from typing import List, Optional

from redis.exceptions import RedisError

from watermark_backend.domain.errors import StorageError
from watermark_backend.domain.file_storage.entities import StoredFile, utcnow
from watermark_backend.domain.file_storage.repositories import FileRepository

logger = logging.getLogger(__name__)


class RedisFileRepository(FileRepository):
    """Redis-based implementation of FileRepository."""

    def __init__(self, redis_repository):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance from infrastructure layer
        """
        self.redis_repo = redis_repository
        self.file_prefix = "file"
        self.expiry_index = "file_expiry"

    def _file_key(self, file_id: str) -> str:
        return f"{self.file_prefix}:{file_id}"

    def save(self, file: StoredFile) -> bool:
        """
        Save file metadata and register it in the expiry index.
        """
        if not self.redis_repo.set_json(self._file_key(file.id), file.to_dict()):
            return False

        if not self.redis_repo.add_to_sorted_set(
            self.expiry_index, file.id, file.expires_at.timestamp()
        ):
            # Without an index entry the sweep would never find it
            self.redis_repo.delete(self._file_key(file.id))
            return False

        return True

    def get(self, file_id: str) -> Optional[StoredFile]:
        try:
            data = self.redis_repo.get_json(self._file_key(file_id))
        except RedisError as e:
            logger.error("Error reading file metadata for %s: %s", file_id, e)
            raise StorageError(f"File metadata unavailable: {e}") from e

        if data is None:
            return None

        try:
            return StoredFile.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Error deserializing file metadata for %s: %s", file_id, e)
            return None

    def delete(self, file_id: str) -> bool:
        """
        Delete file metadata and its expiry index entry.
        """
        deleted = self.redis_repo.delete(self._file_key(file_id))
        self.redis_repo.remove_from_sorted_set(self.expiry_index, file_id)
        return deleted

    def get_expired_files(self, now: Optional[datetime] = None) -> List[StoredFile]:
        """
        Get records whose expires_at is at or before now.

        Index entries whose record has disappeared are pruned.
        """
        cutoff = (now or utcnow()).timestamp()
        file_ids = self._index_members(max_score=cutoff)

        expired_files = []
        for file_id in file_ids:
            file = self.get(file_id)
            if file is None:
                self.redis_repo.remove_from_sorted_set(self.expiry_index, file_id)
                continue
            expired_files.append(file)

        return expired_files

    def list_stored_names(self) -> List[str]:
        names = []
        for file_id in self._index_members():
            file = self.get(file_id)
            if file is not None:
                names.append(file.stored_name)
        return names

    def _index_members(self, max_score: float = float("inf")) -> List[str]:
        try:
            return self.redis_repo.get_sorted_set_members(self.expiry_index, max_score=max_score)
        except RedisError as e:
            logger.error("Error reading expiry index: %s", e)
            raise StorageError(f"Expiry index unavailable: {e}") from e
