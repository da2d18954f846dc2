"""
Async Redis client owning the connection pool.

Every command is a thin passthrough to redis-py; driver failures are logged
and re-raised as StoreOperationError so callers deal with one error type.
"""

from typing import Any

from redis.asyncio import Redis
from redis.asyncio.client import PubSub
from redis.asyncio.connection import ConnectionPool

from shared_redis.cache.config import RedisSettings
from shared_redis.config.logging import get_logger
from shared_redis.exceptions import CacheConnectionError, StoreOperationError

logger = get_logger(__name__)


class RedisClient:
    """Redis client with async connection pool."""

    def __init__(
        self,
        url: str,
        max_connections: int = 50,
        decode_responses: bool = False,
        socket_timeout: float = 5.0,
        socket_connect_timeout: float = 5.0,
    ):
        """
        Initialize Redis client.

        Args:
            url: Redis connection URL
            max_connections: Maximum number of connections
            decode_responses: Decode responses to strings
            socket_timeout: Socket timeout in seconds
            socket_connect_timeout: Socket connect timeout in seconds
        """
        self.url = url
        self.max_connections = max_connections
        self.decode_responses = decode_responses
        self.socket_timeout = socket_timeout
        self.socket_connect_timeout = socket_connect_timeout

        self._pool: ConnectionPool | None = None
        self._client: Redis | None = None

    @classmethod
    def from_settings(cls, settings: RedisSettings) -> "RedisClient":
        """
        Build a client from Redis settings.

        Args:
            settings: Redis settings

        Returns:
            Unconnected client
        """
        return cls(
            url=settings.get_effective_url(),
            max_connections=settings.redis_max_connections,
            decode_responses=settings.redis_decode_responses,
            socket_timeout=settings.redis_socket_timeout,
            socket_connect_timeout=settings.redis_socket_connect_timeout,
        )

    @property
    def is_connected(self) -> bool:
        """Whether connect() has succeeded and disconnect() has not been called."""
        return self._client is not None

    async def connect(self) -> None:
        """
        Connect to Redis server.

        Raises:
            CacheConnectionError: If connection fails
        """
        try:
            self._pool = ConnectionPool.from_url(
                self.url,
                max_connections=self.max_connections,
                decode_responses=self.decode_responses,
                socket_timeout=self.socket_timeout,
                socket_connect_timeout=self.socket_connect_timeout,
            )
            self._client = Redis(connection_pool=self._pool)

            await self._client.ping()

            logger.info("redis_connected", url=self._redacted_url())

        except Exception as e:
            logger.error("redis_connection_failed", error=str(e), url=self._redacted_url())
            await self._discard_pool()
            raise CacheConnectionError(f"Failed to connect to Redis: {e}") from e

    async def _discard_pool(self) -> None:
        """Drop a half-built client and close any connections its pool opened."""
        pool, self._pool, self._client = self._pool, None, None
        if pool is None:
            return
        try:
            await pool.aclose()
        except Exception as e:
            logger.warning("redis_pool_close_failed", error=str(e))

    async def disconnect(self) -> None:
        """Disconnect from Redis server."""
        if self._client:
            await self._client.aclose()
            self._client = None

        if self._pool:
            await self._pool.aclose()
            self._pool = None

        logger.info("redis_disconnected")

    def get_client(self) -> Redis:
        """
        Get the underlying redis-py client.

        Returns:
            Redis client instance

        Raises:
            CacheConnectionError: If not connected
        """
        if not self._client:
            raise CacheConnectionError("Redis client not connected. Call connect() first.")
        return self._client

    def _redacted_url(self) -> str:
        """Connection URL with the password masked, for logging."""
        scheme, sep, rest = self.url.partition("://")
        if not sep or "@" not in rest:
            return self.url
        credentials, _, location = rest.rpartition("@")
        username = credentials.partition(":")[0]
        return f"{scheme}://{username}:***@{location}"

    async def ping(self) -> bool:
        """
        Ping Redis server.

        Returns:
            True if ping successful

        Raises:
            StoreOperationError: If ping fails
        """
        try:
            result: bool = await self.get_client().ping()
            return result
        except Exception as e:
            logger.error("redis_ping_failed", error=str(e))
            raise StoreOperationError("ping", f"Redis ping failed: {e}") from e

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
    ) -> bool:
        """
        Set a key-value pair, with SETEX when a TTL is given.

        Args:
            key: Cache key
            value: Value to store
            ttl: Time to live in seconds

        Returns:
            True if successful

        Raises:
            StoreOperationError: If operation fails
        """
        try:
            client = self.get_client()
            if ttl:
                return bool(await client.setex(key, ttl, value))
            return bool(await client.set(key, value))
        except Exception as e:
            logger.error("redis_set_failed", key=key, error=str(e))
            raise StoreOperationError("set", f"Redis set failed: {e}", key=key) from e

    async def set_if_not_exists(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
    ) -> bool:
        """
        Set a key only if it does not exist yet (SET NX, with EX when a TTL is given).

        Args:
            key: Key to claim
            value: Value to store
            ttl: Time to live in seconds

        Returns:
            True if the key was set, False if it already existed

        Raises:
            StoreOperationError: If operation fails
        """
        try:
            result = await self.get_client().set(key, value, nx=True, ex=ttl)
            return bool(result)
        except Exception as e:
            logger.error("redis_setnx_failed", key=key, error=str(e))
            raise StoreOperationError("set_nx", f"Redis set NX failed: {e}", key=key) from e

    async def get(self, key: str) -> Any | None:
        """
        Get a value by key.

        Args:
            key: Cache key

        Returns:
            Stored value or None if not found

        Raises:
            StoreOperationError: If operation fails
        """
        try:
            return await self.get_client().get(key)
        except Exception as e:
            logger.error("redis_get_failed", key=key, error=str(e))
            raise StoreOperationError("get", f"Redis get failed: {e}", key=key) from e

    async def delete(self, key: str) -> int:
        """
        Delete a key.

        Args:
            key: Cache key

        Returns:
            Number of keys deleted

        Raises:
            StoreOperationError: If operation fails
        """
        try:
            return int(await self.get_client().delete(key))
        except Exception as e:
            logger.error("redis_delete_failed", key=key, error=str(e))
            raise StoreOperationError("delete", f"Redis delete failed: {e}", key=key) from e

    async def exists(self, key: str) -> bool:
        """
        Check if a key exists.

        Args:
            key: Cache key

        Returns:
            True if key exists

        Raises:
            StoreOperationError: If operation fails
        """
        try:
            return bool(await self.get_client().exists(key))
        except Exception as e:
            logger.error("redis_exists_failed", key=key, error=str(e))
            raise StoreOperationError("exists", f"Redis exists failed: {e}", key=key) from e

    async def expire(self, key: str, ttl: int) -> bool:
        """
        Set expiration on a key.

        Args:
            key: Cache key
            ttl: Time to live in seconds

        Returns:
            True if the timeout was set

        Raises:
            StoreOperationError: If operation fails
        """
        try:
            return bool(await self.get_client().expire(key, ttl))
        except Exception as e:
            logger.error("redis_expire_failed", key=key, ttl=ttl, error=str(e))
            raise StoreOperationError("expire", f"Redis expire failed: {e}", key=key) from e

    async def scan_keys(self, pattern: str) -> list[str]:
        """
        List keys matching a glob pattern using SCAN.

        Args:
            pattern: Glob pattern (e.g., "user_profile:*")

        Returns:
            Matching keys, decoded to str

        Raises:
            StoreOperationError: If operation fails
        """
        try:
            keys = []
            async for key in self.get_client().scan_iter(match=pattern):
                keys.append(key.decode() if isinstance(key, bytes) else key)
            return keys
        except Exception as e:
            logger.error("redis_scan_failed", pattern=pattern, error=str(e))
            raise StoreOperationError("scan", f"Redis scan failed: {e}") from e

    async def info(self, section: str | None = None) -> dict[str, Any]:
        """
        Fetch server INFO.

        Args:
            section: INFO section (e.g., "memory"); all sections when None

        Returns:
            Parsed INFO fields

        Raises:
            StoreOperationError: If operation fails
        """
        try:
            client = self.get_client()
            if section:
                return dict(await client.info(section))
            return dict(await client.info())
        except Exception as e:
            logger.error("redis_info_failed", section=section, error=str(e))
            raise StoreOperationError("info", f"Redis info failed: {e}") from e

    async def publish(self, channel: str, message: str | bytes) -> int:
        """
        Publish a message to a channel.

        Args:
            channel: Channel name
            message: Encoded message

        Returns:
            Number of subscribers that received the message

        Raises:
            StoreOperationError: If operation fails
        """
        try:
            return int(await self.get_client().publish(channel, message))
        except Exception as e:
            logger.error("redis_publish_failed", channel=channel, error=str(e))
            raise StoreOperationError("publish", f"Redis publish failed: {e}") from e

    def pubsub(self) -> PubSub:
        """
        Create a pub/sub handle bound to the connection pool.

        Returns:
            redis-py PubSub object; the caller is responsible for closing it

        Raises:
            CacheConnectionError: If not connected
        """
        return self.get_client().pubsub(ignore_subscribe_messages=True)
