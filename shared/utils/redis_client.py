"""
Redis client utilities for the SaaS starter

Provides Redis connection management and JSON caching operations.
"""

import json
import logging
from typing import Optional, Any

import redis
from redis.connection import ConnectionPool

logger = logging.getLogger(__name__)


class RedisClient:
    """Redis client wrapper with connection management and utility methods"""

    def __init__(self, redis_url: str, client: Optional[redis.Redis] = None):
        """
        Initialize Redis client

        Args:
            redis_url: Redis connection URL
            client: Pre-built client (tests)
        """
        self.redis_url = redis_url
        self.pool = None
        self.client = client or self._initialize_client()

    def _initialize_client(self) -> redis.Redis:
        """Initialize Redis client with connection pool"""
        self.pool = ConnectionPool.from_url(
            self.redis_url,
            max_connections=20,
            retry_on_timeout=True,
            socket_keepalive=True,
            health_check_interval=30,
            decode_responses=True
        )
        logger.info("Redis client initialized")
        return redis.Redis(connection_pool=self.pool)

    def test_connection(self) -> bool:
        """
        Test Redis connection

        Returns:
            True if connection successful, False otherwise
        """
        try:
            self.client.ping()
            return True
        except redis.RedisError as e:
            logger.error(f"Redis connection test failed: {e}")
            return False

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Store a JSON-serialisable value

        Args:
            key: Cache key
            value: Value to store
            ttl: Time to live in seconds

        Returns:
            True if stored, False on Redis failure
        """
        try:
            payload = json.dumps(value)
            if ttl:
                return bool(self.client.setex(key, ttl, payload))
            return bool(self.client.set(key, payload))
        except redis.RedisError as e:
            logger.error(f"Failed to set Redis key {key}: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """
        Fetch and decode a JSON value

        Args:
            key: Cache key
            default: Returned on a miss or Redis failure

        Returns:
            Decoded value or default
        """
        try:
            payload = self.client.get(key)
        except redis.RedisError as e:
            logger.error(f"Failed to get Redis key {key}: {e}")
            return default

        if payload is None:
            return default

        try:
            return json.loads(payload)
        except (TypeError, ValueError):
            logger.warning(f"Discarding undecodable value at Redis key {key}")
            return default

    def delete(self, *keys: str) -> int:
        """
        Delete keys

        Returns:
            Number of keys deleted (0 on Redis failure)
        """
        if not keys:
            return 0
        try:
            return int(self.client.delete(*keys))
        except redis.RedisError as e:
            logger.error(f"Failed to delete Redis keys {keys}: {e}")
            return 0

    def incr(self, key: str) -> Optional[int]:
        """
        Atomically increment a counter

        Returns:
            New value, or None on Redis failure
        """
        try:
            return int(self.client.incr(key))
        except redis.RedisError as e:
            logger.error(f"Failed to increment Redis key {key}: {e}")
            return None

    def close(self):
        """Release pooled connections"""
        if self.pool is not None:
            self.pool.disconnect()
