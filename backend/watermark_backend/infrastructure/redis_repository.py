"""
Redis Repository Base Class

Thin JSON and sorted-set helpers over a Redis client, with key prefixing.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisRepository:
    """Base Redis repository for JSON documents and score-ordered indexes."""

    def __init__(self, redis_client: redis.Redis, key_prefix: str = ""):
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        """Create a prefixed key for Redis storage."""
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    def set_json(self, key: str, data: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        """
        Set JSON data with optional TTL.

        Returns:
            True if successful, False otherwise
        """
        try:
            redis_key = self._make_key(key)
            json_data = json.dumps(data)

            if ttl:
                return bool(self.redis.setex(redis_key, ttl, json_data))
            return bool(self.redis.set(redis_key, json_data))
        except (RedisError, TypeError) as e:
            logger.error("Error setting JSON data for key %s: %s", key, e)
            return False

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Get JSON data from Redis.

        Returns:
            Dictionary if found and valid JSON, None otherwise

        Raises:
            RedisError: If Redis cannot be read
        """
        data = self.redis.get(self._make_key(key))

        if data is None:
            return None

        try:
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            return json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("Error getting JSON data for key %s: %s", key, e)
            return None

    def delete(self, key: str) -> bool:
        """
        Delete a key from Redis.

        Returns:
            True if key was deleted, False otherwise
        """
        try:
            return self.redis.delete(self._make_key(key)) > 0
        except RedisError as e:
            logger.error("Error deleting key %s: %s", key, e)
            return False

    def add_to_sorted_set(self, key: str, member: str, score: float) -> bool:
        """Add or update a member of a sorted set."""
        try:
            self.redis.zadd(self._make_key(key), {member: score})
            return True
        except RedisError as e:
            logger.error("Error adding %s to sorted set %s: %s", member, key, e)
            return False

    def get_sorted_set_members(
        self, key: str, min_score: float = float("-inf"), max_score: float = float("inf")
    ) -> List[str]:
        """
        Members with min_score <= score <= max_score, lowest score first.

        Raises:
            RedisError: If Redis cannot be read
        """
        members = self.redis.zrangebyscore(self._make_key(key), min_score, max_score)
        return [m.decode("utf-8") if isinstance(m, bytes) else m for m in members]

    def remove_from_sorted_set(self, key: str, member: str) -> bool:
        try:
            return self.redis.zrem(self._make_key(key), member) > 0
        except RedisError as e:
            logger.error("Error removing %s from sorted set %s: %s", member, key, e)
            return False


class RedisConnectionManager:
    """Manages Redis connection with connection pooling."""

    def __init__(self, host: str = 'localhost', port: int = 6379, db: int = 0,
                 max_connections: int = 20, password: Optional[str] = None,
                 decode_responses: bool = False):
        self.connection_pool = redis.ConnectionPool(
            host=host,
            port=port,
            db=db,
            password=password,
            max_connections=max_connections,
            decode_responses=decode_responses,
            retry_on_timeout=True,
            socket_keepalive=True,
            socket_connect_timeout=2,
        )
        self._client = None

    @property
    def client(self) -> redis.Redis:
        """Get Redis client instance with connection pooling."""
        if self._client is None:
            self._client = redis.Redis(connection_pool=self.connection_pool)
        return self._client

    def health_check(self) -> bool:
        """Check if Redis connection is healthy."""
        try:
            return bool(self.client.ping())
        except (RedisConnectionError, OSError):
            return False

    def close(self):
        """Close the connection pool."""
        if self.connection_pool:
            self.connection_pool.disconnect()
