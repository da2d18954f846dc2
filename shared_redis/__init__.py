"""
shared-redis: Redis cache and pub/sub helpers shared between services.
"""

from shared_redis.cache import CachedResponse, CacheKeys, CacheManager, RedisClient, RedisSettings
from shared_redis.messaging import ChannelMessage, RedisPublisher, RedisSubscriber

__version__ = "0.1.0"

__all__ = [
    "CacheManager",
    "CacheKeys",
    "CachedResponse",
    "RedisClient",
    "RedisSettings",
    "RedisPublisher",
    "RedisSubscriber",
    "ChannelMessage",
]
