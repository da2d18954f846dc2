"""
Idempotency keys backed by SET NX EX.
"""

from typing import Any

from shared_redis.cache.config import RedisSettings, get_redis_settings
from shared_redis.cache.keys import CacheKeys
from shared_redis.cache.redis_client import RedisClient
from shared_redis.config.logging import get_logger

logger = get_logger(__name__)


class IdempotencyGuard:
    """Claims one-shot keys so a request is processed at most once per expiry window."""

    PREFIX = "idempotency"

    def __init__(self, client: RedisClient, settings: RedisSettings | None = None):
        """
        Initialize idempotency guard.

        Args:
            client: Connected Redis client
            settings: Redis settings (IDEMPOTENT_EXPIRY_IN_SEC is read from here)
        """
        self.client = client
        self.settings = settings or get_redis_settings()

    def key_for(self, token: str) -> str:
        """Redis key holding the claim for a token."""
        return CacheKeys.custom(self.PREFIX, token)

    async def claim(self, token: str, value: Any = "1") -> bool:
        """
        Claim a token.

        Args:
            token: Idempotency token (e.g., a request ID)
            value: Value stored with the claim

        Returns:
            True if this caller claimed the token, False if it was already claimed

        Raises:
            StoreOperationError: If the store command fails
        """
        key = self.key_for(token)
        claimed = await self.client.set_if_not_exists(
            key, value, ttl=self.settings.idempotent_expiry_in_sec
        )
        if not claimed:
            logger.info("idempotency_key_already_claimed", key=key)
        return claimed

    async def release(self, token: str) -> bool:
        """
        Release a claimed token before it expires.

        Returns:
            True if a claim was removed

        Raises:
            StoreOperationError: If the store command fails
        """
        return await self.client.delete(self.key_for(token)) > 0
