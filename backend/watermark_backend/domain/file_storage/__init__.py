"""
File Storage Domain

Handles upload validation, id-keyed file records, and expiry cleanup.
"""

from .entities import StoredFile
from .repositories import FileRepository
from .services import FileManager, FileNotFoundError
from .storage_repository import IFileStorageRepository
from .value_objects import ALLOWED_MIME_TYPES, MAX_UPLOAD_BYTES, StoredName

__all__ = [
    "ALLOWED_MIME_TYPES",
    "MAX_UPLOAD_BYTES",
    "FileManager",
    "FileNotFoundError",
    "FileRepository",
    "IFileStorageRepository",
    "StoredFile",
    "StoredName",
]
