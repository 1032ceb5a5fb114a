# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Redis client for the learning pattern cache.

This module provides an async Redis client wrapper. The client is created
and owned by the caller and handed to RedisPatternStore; nothing here is
process-global.

Example:
    from adaptlearn.infrastructure.cache import RedisClient, RedisPatternStore

    # Connect at startup
    client = RedisClient(settings)
    await client.connect()

    store = RedisPatternStore(client, settings.adaptive)

    # Cleanup at shutdown
    await client.close()
"""

from typing import TYPE_CHECKING, Optional

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError as BaseRedisError

if TYPE_CHECKING:
    from adaptlearn.core.config.settings import Settings


class RedisError(Exception):
    """Exception raised for Redis operation failures.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying Redis error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the Redis error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class RedisClient:
    """Async Redis client for string values.

    Wraps the redis-py async client with connection pooling and converts
    driver errors into RedisError.

    Example:
        client = RedisClient(settings)
        await client.connect()

        await client.set("key", "value", expire_seconds=60)
        value = await client.get("key")

        await client.close()
    """

    def __init__(self, settings: "Settings", redis: Optional[Redis] = None) -> None:
        """Initialize the Redis client.

        Args:
            settings: Application settings containing Redis configuration.
            redis: Already connected redis-py client to use instead of
                creating a pool on connect().
        """
        self._settings = settings
        self._pool: Optional[ConnectionPool] = None
        self._redis: Optional[Redis] = redis

    @property
    def is_connected(self) -> bool:
        """Whether the client has a live connection."""
        return self._redis is not None

    async def connect(self) -> None:
        """Create the Redis connection pool.

        Raises:
            RedisError: If connection fails.
        """
        try:
            self._pool = ConnectionPool.from_url(
                self._settings.redis.url,
                max_connections=self._settings.redis.max_connections,
                decode_responses=True,
            )
            self._redis = Redis(connection_pool=self._pool)

            # Verify connection
            await self._redis.ping()
        except BaseRedisError as e:
            raise RedisError("Failed to connect to Redis", e) from e

    async def close(self) -> None:
        """Close the Redis connection pool."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None

        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None

    def _ensure_connected(self) -> Redis:
        """Ensure the client is connected.

        Returns:
            The Redis client instance.

        Raises:
            RedisError: If not connected.
        """
        if self._redis is None:
            raise RedisError("Redis client not connected. Call connect() first.")
        return self._redis

    async def set(
        self,
        key: str,
        value: str,
        expire_seconds: Optional[int] = None,
    ) -> None:
        """Set a key-value pair.

        Args:
            key: The key.
            value: The string value.
            expire_seconds: Optional expiration time in seconds.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            await redis.set(key, value, ex=expire_seconds)
        except BaseRedisError as e:
            raise RedisError(f"Failed to set key: {key}", e) from e

    async def get(self, key: str) -> Optional[str]:
        """Get a value by key.

        Args:
            key: The key.

        Returns:
            The stored string or None if not found.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            value = await redis.get(key)
        except BaseRedisError as e:
            raise RedisError(f"Failed to get key: {key}", e) from e
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value
