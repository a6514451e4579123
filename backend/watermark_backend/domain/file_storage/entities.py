"""
File Storage Entities

Domain entity for uploaded files with expiration tracking.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from .value_objects import StoredName


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StoredFile:
    """
    Entity representing an uploaded file.

    Created once on a successful upload and never mutated. The id is the
    generated stored name without its extension.
    """

    id: str
    original_name: str
    stored_name: str
    size_bytes: int
    mime_type: str
    storage_path: str
    created_at: datetime
    expires_at: datetime

    def __post_init__(self):
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be later than created_at")

    @classmethod
    def create(
        cls,
        stored_name: StoredName,
        original_name: str,
        size_bytes: int,
        mime_type: str,
        storage_path: str,
        retention: timedelta,
        created_at: Optional[datetime] = None,
    ) -> "StoredFile":
        """
        Factory method to create a new stored file entry.

        Args:
            stored_name: Generated name the bytes are stored under
            original_name: Client-supplied filename
            size_bytes: Number of bytes written
            mime_type: Declared media type
            storage_path: Absolute path of the stored bytes
            retention: How long the file is kept
            created_at: Creation time (default: now, UTC)

        Returns:
            New StoredFile instance
        """
        now = created_at or utcnow()
        return cls(
            id=stored_name.file_id,
            original_name=original_name,
            stored_name=str(stored_name),
            size_bytes=size_bytes,
            mime_type=mime_type,
            storage_path=storage_path,
            created_at=now,
            expires_at=now + retention,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utcnow()) >= self.expires_at

    def public_url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/files/{self.stored_name}"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "original_name": self.original_name,
            "stored_name": self.stored_name,
            "size_bytes": self.size_bytes,
            "mime_type": self.mime_type,
            "storage_path": self.storage_path,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StoredFile":
        """Create StoredFile from dictionary."""
        return cls(
            id=data["id"],
            original_name=data["original_name"],
            stored_name=data["stored_name"],
            size_bytes=int(data["size_bytes"]),
            mime_type=data["mime_type"],
            storage_path=data["storage_path"],
            created_at=datetime.fromisoformat(data["created_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )
