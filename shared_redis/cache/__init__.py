"""
Redis cache utilities.
"""

from shared_redis.cache.backend import CacheBackend, Connected, Disabled
from shared_redis.cache.cache_manager import CacheManager
from shared_redis.cache.config import RedisSettings, StoreErrorPolicy, get_redis_settings
from shared_redis.cache.envelope import CachedResponse, CacheWriteResult, decode_envelope
from shared_redis.cache.idempotency import IdempotencyGuard
from shared_redis.cache.keys import CacheKeys, canonical_json
from shared_redis.cache.redis_client import RedisClient

__all__ = [
    "RedisClient",
    "CacheManager",
    "CacheKeys",
    "CachedResponse",
    "CacheWriteResult",
    "decode_envelope",
    "IdempotencyGuard",
    "CacheBackend",
    "Connected",
    "Disabled",
    "RedisSettings",
    "StoreErrorPolicy",
    "canonical_json",
    "get_redis_settings",
]
