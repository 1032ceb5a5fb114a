# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning pattern stores.

Two PatternStore implementations with the same expiry semantics:

- InMemoryPatternStore: per-instance dict with TTL, for tests and single
  process deployments.
- RedisPatternStore: JSON values under prefixed keys with SET ... EX.

Patterns are keyed by ``learning_pattern:{user_id}:{subject}``; an upsert
replaces the previous pattern for the same user and subject.
"""

import logging
import time
from collections.abc import Callable

from pydantic import ValidationError

from adaptlearn.core.adaptive.base import PatternStore
from adaptlearn.core.adaptive.constants import Subject
from adaptlearn.core.adaptive.exceptions import PersistenceError
from adaptlearn.core.adaptive.models import LearningPattern, pattern_cache_key
from adaptlearn.core.config.settings import AdaptiveSettings
from adaptlearn.infrastructure.cache.redis_client import RedisClient, RedisError

logger = logging.getLogger(__name__)


class InMemoryPatternStore(PatternStore):
    """Dict-backed pattern store with expiry.

    Args:
        ttl_seconds: Lifetime of a stored pattern.
        clock: Monotonic time source in seconds.
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, LearningPattern]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def upsert_pattern(self, pattern: LearningPattern) -> None:
        expires_at = self._clock() + self._ttl_seconds
        self._entries[pattern.cache_key] = (expires_at, pattern.model_copy(deep=True))

    async def get_pattern(self, user_id: str, subject: Subject) -> LearningPattern | None:
        key = pattern_cache_key(user_id, subject)
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, pattern = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return pattern.model_copy(deep=True)

    def clear(self) -> None:
        """Drop every stored pattern."""
        self._entries.clear()


class RedisPatternStore(PatternStore):
    """Pattern store backed by Redis.

    Example:
        store = RedisPatternStore(client, settings.adaptive)
        await store.upsert_pattern(pattern)
        cached = await store.get_pattern("user-1", Subject.MATH)
    """

    def __init__(self, client: RedisClient, settings: AdaptiveSettings) -> None:
        """Initialize the store.

        Args:
            client: Connected Redis client.
            settings: Supplies the key prefix and pattern TTL.
        """
        self._client = client
        self._key_prefix = settings.pattern_key_prefix
        self._ttl_seconds = settings.pattern_ttl_seconds

    def _key(self, cache_key: str) -> str:
        return f"{self._key_prefix}:{cache_key}"

    async def upsert_pattern(self, pattern: LearningPattern) -> None:
        """Write the pattern as JSON with the configured TTL.

        Raises:
            PersistenceError: If the Redis write fails.
        """
        key = self._key(pattern.cache_key)
        try:
            await self._client.set(
                key, pattern.model_dump_json(), expire_seconds=self._ttl_seconds
            )
        except RedisError as e:
            raise PersistenceError(f"Failed to cache learning pattern: {key}", e) from e

    async def get_pattern(self, user_id: str, subject: Subject) -> LearningPattern | None:
        """Read a cached pattern.

        A value that no longer validates is treated as a miss.

        Raises:
            PersistenceError: If the Redis read fails.
        """
        key = self._key(pattern_cache_key(user_id, subject))
        try:
            raw = await self._client.get(key)
        except RedisError as e:
            raise PersistenceError(f"Failed to read learning pattern: {key}", e) from e

        if raw is None:
            return None

        try:
            return LearningPattern.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding invalid cached pattern %s: %s", key, str(e))
            return None
