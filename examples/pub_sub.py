"""
Pub/sub example.

One task publishes login events and notifications while two subscribers
consume them.

Usage:
    REDIS_URL=redis://localhost:6379 python examples/pub_sub.py
"""

import asyncio
from contextlib import aclosing
from datetime import UTC, datetime

from pydantic import BaseModel

from shared_redis.cache import RedisClient, get_redis_settings
from shared_redis.config import configure_logging, get_logger
from shared_redis.messaging import RedisPublisher, RedisSubscriber

logger = get_logger(__name__)

USER_EVENTS = "user_events"
NOTIFICATIONS = "notifications"


class UserEvent(BaseModel):
    user_id: int
    event_type: str
    data: dict
    timestamp: datetime


class NotificationMessage(BaseModel):
    recipient_id: int
    message: str
    priority: str = "normal"
    created_at: datetime


async def publish_events(publisher: RedisPublisher) -> None:
    for user_id in range(1, 6):
        event = UserEvent(
            user_id=user_id,
            event_type="login",
            data={"ip_address": "192.168.1.100"},
            timestamp=datetime.now(UTC),
        )
        receivers = await publisher.publish(USER_EVENTS, event)
        logger.info("user_event_published", user_id=user_id, receivers=receivers)
        await asyncio.sleep(0.5)

    for recipient_id in range(1, 4):
        notification = NotificationMessage(
            recipient_id=recipient_id,
            message=f"Welcome back, user {recipient_id}!",
            created_at=datetime.now(UTC),
        )
        await publisher.publish(NOTIFICATIONS, notification)
        await asyncio.sleep(0.2)


async def consume(subscriber: RedisSubscriber, channel: str, model: type[BaseModel], limit: int) -> None:
    received = 0
    async with aclosing(subscriber.subscribe(channel)) as messages:
        async for message in messages:
            item = model.model_validate_json(message.data)
            logger.info("message_consumed", channel=channel, item=item.model_dump(mode="json"))
            received += 1
            if received >= limit:
                break


async def main() -> None:
    configure_logging()

    client = RedisClient.from_settings(get_redis_settings())
    await client.connect()

    subscriber = RedisSubscriber(client)
    consumers = [
        asyncio.create_task(consume(subscriber, USER_EVENTS, UserEvent, limit=5)),
        asyncio.create_task(consume(subscriber, NOTIFICATIONS, NotificationMessage, limit=3)),
    ]
    # Give the subscriptions time to register before publishing
    await asyncio.sleep(0.5)

    await publish_events(RedisPublisher(client))
    await asyncio.gather(*consumers)
    await client.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
