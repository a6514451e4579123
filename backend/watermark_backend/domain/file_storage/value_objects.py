"""
File Storage Value Objects

Immutable value objects for type safety and validation.
"""

import os
import re
import secrets
import time
from dataclasses import dataclass
from typing import Optional

ALLOWED_MIME_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        "text/plain",
        "text/csv",
        "application/json",
        "text/xml",
        "application/xml",
        "image/jpeg",
        "image/png",
        "image/gif",
        "audio/mpeg",
        "audio/wav",
        "video/mp4",
    }
)

MAX_UPLOAD_BYTES = 50 * 1024 * 1024

_STORED_NAME_RE = re.compile(r"^(?P<millis>\d+)_(?P<nonce>[0-9a-f]{32})(?P<ext>\.[A-Za-z0-9]+)?$")


class InvalidStoredNameError(ValueError):
    """Raised when a stored name does not follow the generated format."""
    pass


def is_allowed_mime_type(mime_type: Optional[str]) -> bool:
    return bool(mime_type) and mime_type in ALLOWED_MIME_TYPES


@dataclass(frozen=True)
class StoredName:
    """
    Value object for a generated storage filename.

    Format: ``{unixMillis}_{32 hex chars}{ext}``. The 16 random bytes make
    collisions within one storage directory negligible.
    """

    value: str

    def __post_init__(self):
        if not _STORED_NAME_RE.match(self.value):
            raise InvalidStoredNameError(f"Invalid stored name: {self.value!r}")

    @classmethod
    def generate(cls, original_name: str, now_millis: Optional[int] = None) -> "StoredName":
        """
        Generate a new stored name keeping the original file's extension.

        Args:
            original_name: Client-supplied filename
            now_millis: Timestamp override in milliseconds

        Returns:
            New StoredName instance
        """
        millis = now_millis if now_millis is not None else int(time.time() * 1000)
        nonce = secrets.token_hex(16)
        return cls(f"{millis}_{nonce}{cls._extension(original_name)}")

    @staticmethod
    def _extension(original_name: str) -> str:
        ext = os.path.splitext(os.path.basename(original_name or ""))[1]
        # Anything not plain alphanumeric is dropped rather than stored
        if ext and re.fullmatch(r"\.[A-Za-z0-9]+", ext):
            return ext
        return ""

    @property
    def file_id(self) -> str:
        """The stored name with its extension stripped."""
        return os.path.splitext(self.value)[0]

    def __str__(self) -> str:
        return self.value
