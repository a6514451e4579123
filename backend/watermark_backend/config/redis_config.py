"""
Redis Configuration

Connection settings for the Redis instance holding upload records and
expiry index, plus factory functions for clients and repositories.
"""

import os
from typing import Optional

from watermark_backend.infrastructure.redis_repository import RedisConnectionManager, RedisRepository


class RedisConfig:
    """Redis configuration settings."""

    def __init__(self):
        self.host = os.getenv("REDIS_HOST", "localhost")
        self.port = int(os.getenv("REDIS_PORT", 6379))
        self.db = int(os.getenv("REDIS_DB", 0))
        self.password = os.getenv("REDIS_PASSWORD")
        self.max_connections = int(os.getenv("REDIS_MAX_CONNECTIONS", 20))
        self.key_prefix = os.getenv("REDIS_KEY_PREFIX", "watermark")

        # redis://[:password@]host:port/db takes precedence over the parts above
        self.url = os.getenv("REDIS_URL")
        if self.url:
            import redis

            connection_params = redis.connection.parse_url(self.url)
            self.host = connection_params.get("host", self.host)
            self.port = connection_params.get("port", self.port)
            self.db = connection_params.get("db", self.db)
            self.password = connection_params.get("password", self.password)


_redis_manager: Optional[RedisConnectionManager] = None
_key_prefix: str = ""


def init_redis(config: Optional[RedisConfig] = None) -> RedisConnectionManager:
    """
    Initialize the Redis connection manager.

    The pool connects lazily, so this succeeds even when Redis is down;
    use redis_health_check() to probe it.

    Args:
        config: Redis configuration, uses default if None

    Returns:
        RedisConnectionManager instance
    """
    global _redis_manager, _key_prefix

    if config is None:
        config = RedisConfig()

    connection_kwargs = {
        "host": config.host,
        "port": config.port,
        "db": config.db,
        "max_connections": config.max_connections,
    }

    if config.password:
        connection_kwargs["password"] = config.password

    _redis_manager = RedisConnectionManager(**connection_kwargs)
    _key_prefix = config.key_prefix
    return _redis_manager


def get_redis_client():
    """
    Get Redis client instance.

    Raises:
        RuntimeError: If Redis is not initialized
    """
    if _redis_manager is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")

    return _redis_manager.client


def get_redis_repository(key_prefix: Optional[str] = None) -> RedisRepository:
    """
    Get Redis repository, namespaced with the configured key prefix by default.
    """
    client = get_redis_client()
    return RedisRepository(client, _key_prefix if key_prefix is None else key_prefix)


def redis_health_check() -> bool:
    if _redis_manager is None:
        return False

    return _redis_manager.health_check()
