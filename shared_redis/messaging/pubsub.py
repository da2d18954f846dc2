"""
Redis publish/subscribe helpers.
"""

import json
from collections.abc import AsyncIterator
from typing import Any

from pydantic import BaseModel
from redis.asyncio.client import PubSub

from shared_redis.cache.redis_client import RedisClient
from shared_redis.config.logging import get_logger
from shared_redis.exceptions import MessagePublishError, MessageSubscribeError

logger = get_logger(__name__)


class ChannelMessage(BaseModel):
    """Message received on a subscribed channel."""

    channel: str
    data: str

    def json_payload(self) -> Any:
        """
        Decode the message data as JSON.

        Raises:
            json.JSONDecodeError: If the data is not JSON
        """
        return json.loads(self.data)


def _decode(value: str | bytes) -> str:
    return value.decode("utf-8", errors="replace") if isinstance(value, bytes) else value


class RedisPublisher:
    """Publishes messages to Redis channels."""

    def __init__(self, client: RedisClient):
        """
        Initialize publisher.

        Args:
            client: Connected Redis client
        """
        self.client = client

    async def publish(self, channel: str, message: Any) -> int:
        """
        Publish a message to a channel.

        Args:
            channel: Channel name
            message: str/bytes sent as-is, pydantic models and JSON-compatible
                values are JSON encoded

        Returns:
            Number of subscribers that received the message

        Raises:
            MessagePublishError: If publishing fails
        """
        try:
            if isinstance(message, str | bytes):
                body = message
            elif isinstance(message, BaseModel):
                body = message.model_dump_json()
            else:
                body = json.dumps(message)

            receivers = await self.client.publish(channel, body)

            logger.debug("message_published", channel=channel, receivers=receivers)
            return receivers

        except Exception as e:
            logger.error("message_publish_failed", channel=channel, error=str(e))
            raise MessagePublishError(
                channel=channel,
                message=f"Failed to publish message: {e}",
            ) from e


class RedisSubscriber:
    """Subscribes to Redis channels."""

    def __init__(self, client: RedisClient):
        """
        Initialize subscriber.

        Args:
            client: Connected Redis client
        """
        self.client = client

    async def subscribe(self, *channels: str) -> AsyncIterator[ChannelMessage]:
        """
        Subscribe to channels and yield incoming messages.

        The subscription is torn down when the caller stops iterating.

        Args:
            *channels: Channel names

        Yields:
            Messages published on any of the channels

        Raises:
            MessageSubscribeError: If the subscription cannot be set up
        """
        pubsub: PubSub | None = None
        try:
            pubsub = self.client.pubsub()
            await pubsub.subscribe(*channels)
        except Exception as e:
            logger.error("subscribe_failed", channels=list(channels), error=str(e))
            if pubsub is not None:
                await self._close(pubsub)
            raise MessageSubscribeError(
                channels=list(channels),
                message=f"Failed to subscribe: {e}",
            ) from e

        logger.info("subscribed", channels=list(channels))

        try:
            async for raw in pubsub.listen():
                if raw.get("type") != "message":
                    continue

                message = ChannelMessage(channel=_decode(raw["channel"]), data=_decode(raw["data"]))
                logger.debug("message_received", channel=message.channel)
                yield message
        finally:
            try:
                await pubsub.unsubscribe(*channels)
            except Exception as e:
                logger.warning("unsubscribe_failed", channels=list(channels), error=str(e))
            finally:
                await self._close(pubsub)
            logger.info("unsubscribed", channels=list(channels))

    @staticmethod
    async def _close(pubsub: PubSub) -> None:
        """Return the pubsub connection to the pool; a broken one is only logged."""
        try:
            await pubsub.aclose()
        except Exception as e:
            logger.warning("pubsub_close_failed", error=str(e))
