"""
Backend states for the cache facade.

A cache either holds a live client or is disabled; there is no third state.
"""

from dataclasses import dataclass

from shared_redis.cache.redis_client import RedisClient


@dataclass(frozen=True)
class Connected:
    """Cache backed by a connected Redis client."""

    client: RedisClient


@dataclass(frozen=True)
class Disabled:
    """Cache without a store; every operation is a no-op or a miss."""

    reason: str

    DISABLED = "disabled"
    UNREACHABLE = "unreachable"
    CLOSED = "closed"


CacheBackend = Connected | Disabled
