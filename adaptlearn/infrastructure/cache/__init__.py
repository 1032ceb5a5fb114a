# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning pattern cache.

Example:
    from adaptlearn.infrastructure.cache import RedisClient, RedisPatternStore

    client = RedisClient(settings)
    await client.connect()
    store = RedisPatternStore(client, settings.adaptive)
"""

from adaptlearn.infrastructure.cache.pattern_store import (
    InMemoryPatternStore,
    RedisPatternStore,
)
from adaptlearn.infrastructure.cache.redis_client import RedisClient, RedisError

__all__ = [
    "InMemoryPatternStore",
    "RedisClient",
    "RedisError",
    "RedisPatternStore",
]
