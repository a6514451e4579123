"""Infrastructure layer for Redis, local storage and the watermark service."""

from .local_file_storage_repository import LocalFileStorageRepository
from .redis_file_repository import RedisFileRepository
from .redis_repository import RedisConnectionManager, RedisRepository
from .storage_factory import StorageFactory
from .watermark_api_client import WatermarkApiClient

__all__ = [
    "RedisRepository",
    "RedisConnectionManager",
    "RedisFileRepository",
    "LocalFileStorageRepository",
    "StorageFactory",
    "WatermarkApiClient",
]
