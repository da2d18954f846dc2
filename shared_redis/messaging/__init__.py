"""
Redis pub/sub messaging utilities.
"""

from shared_redis.messaging.pubsub import ChannelMessage, RedisPublisher, RedisSubscriber

__all__ = ["RedisPublisher", "RedisSubscriber", "ChannelMessage"]
