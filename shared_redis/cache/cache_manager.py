"""
TTL cache facade with JSON envelopes.

Store failures never reach the caller unless the store error policy is
"propagate"; a disabled cache behaves as an always-empty cache.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from shared_redis.cache.backend import CacheBackend, Connected, Disabled
from shared_redis.cache.config import RedisSettings, StoreErrorPolicy, get_redis_settings
from shared_redis.cache.envelope import CachedResponse, CacheWriteResult, decode_envelope
from shared_redis.cache.keys import CacheKeys
from shared_redis.cache.redis_client import RedisClient
from shared_redis.config.logging import get_logger
from shared_redis.exceptions import (
    CacheConnectionError,
    DeserializationError,
    StoreOperationError,
)

logger = get_logger(__name__)

T = TypeVar("T")


class CacheManager:
    """Cache of JSON envelopes keyed by hashed request shapes."""

    def __init__(self, backend: CacheBackend, settings: RedisSettings | None = None):
        """
        Initialize cache manager.

        Args:
            backend: Connected client or Disabled marker
            settings: Redis settings (TTL and error policy are read from here)
        """
        self.backend = backend
        self.settings = settings or get_redis_settings()

    @classmethod
    async def create(cls, settings: RedisSettings | None = None) -> "CacheManager":
        """
        Connect to Redis and build a cache manager.

        Never raises on connection problems: an unreachable store or
        CACHE_ENABLED=false yields a disabled cache.

        Args:
            settings: Redis settings

        Returns:
            Cache manager in the connected or disabled state
        """
        settings = settings or get_redis_settings()

        if not settings.cache_enabled:
            logger.info("cache_disabled")
            return cls(Disabled(Disabled.DISABLED), settings)

        client = RedisClient.from_settings(settings)
        try:
            await client.connect()
        except CacheConnectionError as e:
            logger.warning("cache_unreachable_continuing_without_cache", error=str(e))
            return cls(Disabled(Disabled.UNREACHABLE), settings)

        logger.info("cache_connected", ttl=settings.cache_ttl_seconds)
        return cls(Connected(client), settings)

    def is_available(self) -> bool:
        """Whether the cache holds a live connection."""
        return isinstance(self.backend, Connected)

    async def close(self) -> None:
        """Disconnect from Redis; the manager is disabled afterwards."""
        if isinstance(self.backend, Connected):
            await self.backend.client.disconnect()
        self.backend = Disabled(Disabled.CLOSED)

    @staticmethod
    def generate_cache_key(prefix: str, request: Any) -> str:
        """
        Derive the cache key for a request.

        Args:
            prefix: Key namespace
            request: Request object

        Returns:
            Cache key

        Raises:
            SerializationError: If the request cannot be serialized
        """
        return CacheKeys.generate(prefix, request)

    def _handle_store_error(self, event: str, error: StoreOperationError, **context: Any) -> None:
        """Log a store failure and re-raise it when the policy says so."""
        logger.error(event, error=str(error), **context)
        if self.settings.cache_store_error_policy == StoreErrorPolicy.PROPAGATE:
            raise error

    async def get(
        self,
        key: str,
        model: type[T] | None = None,
    ) -> CachedResponse[Any] | None:
        """
        Get a cached envelope.

        An entry that cannot be decoded is deleted and reported as a miss.

        Args:
            key: Cache key
            model: Optional type to validate the payload into

        Returns:
            Envelope or None on a miss
        """
        if not isinstance(self.backend, Connected):
            logger.debug("cache_unavailable_miss", key=key, reason=self.backend.reason)
            return None

        try:
            raw = await self.backend.client.get(key)
        except StoreOperationError as e:
            self._handle_store_error("cache_get_failed", e, key=key)
            return None

        if raw is None:
            logger.debug("cache_miss", key=key)
            return None

        try:
            envelope = decode_envelope(raw, model=model, key=key)
        except DeserializationError as e:
            logger.error("cache_entry_corrupted", key=key, error=str(e))
            await self._evict(key)
            return None

        if envelope.cache_key != key:
            logger.warning("cache_key_mismatch", key=key, stored_key=envelope.cache_key)

        logger.debug("cache_hit", key=key)
        return envelope

    async def _evict(self, key: str) -> None:
        """Best-effort removal of a corrupted entry."""
        try:
            await self.backend.client.delete(key)  # type: ignore[union-attr]
            logger.info("cache_corrupted_entry_removed", key=key)
        except StoreOperationError as e:
            logger.warning("cache_corrupted_entry_remove_failed", key=key, error=str(e))

    async def set(self, key: str, envelope: CachedResponse[Any]) -> bool:
        """
        Store an envelope with the configured TTL.

        Args:
            key: Cache key
            envelope: Envelope to store

        Returns:
            True if the store accepted the write

        Raises:
            SerializationError: If the payload cannot be serialized
        """
        if not isinstance(self.backend, Connected):
            logger.debug("cache_unavailable_skip_set", key=key, reason=self.backend.reason)
            return False

        serialized = envelope.to_json()
        ttl = self.settings.cache_ttl_seconds

        try:
            stored = await self.backend.client.set(key, serialized, ttl=ttl)
        except StoreOperationError as e:
            self._handle_store_error("cache_set_failed", e, key=key)
            return False

        logger.debug("cache_set", key=key, ttl=ttl)
        return stored

    async def cache_response_with_status(
        self,
        prefix: str,
        request: Any,
        value: Any,
    ) -> CacheWriteResult:
        """
        Cache a response under the key derived from its request.

        Args:
            prefix: Key namespace
            request: Request that produced the value
            value: Value to cache

        Returns:
            Envelope and whether the write reached the store

        Raises:
            SerializationError: If the request or value cannot be serialized
        """
        key = self.generate_cache_key(prefix, request)
        envelope: CachedResponse[Any] = CachedResponse(payload=value, cache_key=key)

        stored = await self.set(key, envelope)
        if stored:
            logger.info("response_cached", key=key)

        return CacheWriteResult(envelope=envelope, stored=stored)

    async def cache_response(self, prefix: str, request: Any, value: Any) -> CachedResponse[Any]:
        """
        Cache a response under the key derived from its request.

        The envelope is returned whether or not the write succeeded; use
        cache_response_with_status() to find out.

        Args:
            prefix: Key namespace
            request: Request that produced the value
            value: Value to cache

        Returns:
            Envelope wrapping the value

        Raises:
            SerializationError: If the request or value cannot be serialized
        """
        result = await self.cache_response_with_status(prefix, request, value)
        return result.envelope

    async def get_cached_response(
        self,
        prefix: str,
        request: Any,
        model: type[T] | None = None,
    ) -> CachedResponse[Any] | None:
        """
        Get the cached response for a request.

        Args:
            prefix: Key namespace
            request: Request object
            model: Optional type to validate the payload into

        Returns:
            Envelope or None on a miss

        Raises:
            SerializationError: If the request cannot be serialized
        """
        key = self.generate_cache_key(prefix, request)
        return await self.get(key, model=model)

    async def get_or_compute(
        self,
        prefix: str,
        request: Any,
        factory: Callable[[], Awaitable[Any]],
        model: type[T] | None = None,
    ) -> CachedResponse[Any]:
        """
        Get from cache or compute and cache if not found.

        Args:
            prefix: Key namespace
            request: Request object
            factory: Async callable producing the value on a miss
            model: Optional type to validate a cached payload into

        Returns:
            Cached or freshly computed envelope
        """
        cached = await self.get_cached_response(prefix, request, model=model)
        if cached is not None:
            return cached

        value = await factory()
        return await self.cache_response(prefix, request, value)

    async def delete(self, key: str) -> bool:
        """
        Delete a cache entry.

        Args:
            key: Cache key

        Returns:
            True if a key was removed
        """
        if not isinstance(self.backend, Connected):
            logger.debug("cache_unavailable_skip_delete", key=key, reason=self.backend.reason)
            return False

        try:
            deleted = await self.backend.client.delete(key)
        except StoreOperationError as e:
            self._handle_store_error("cache_delete_failed", e, key=key)
            return False

        logger.debug("cache_deleted", key=key, count=deleted)
        return deleted > 0

    async def clear_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching a glob pattern.

        Best-effort: keys written while the scan runs may survive, and keys
        whose delete fails are skipped, so the count can be partial.

        Args:
            pattern: Glob pattern (e.g., "user_profile:*")

        Returns:
            Number of keys deleted
        """
        if not isinstance(self.backend, Connected):
            logger.debug("cache_unavailable_skip_clear", pattern=pattern)
            return 0

        client = self.backend.client
        try:
            keys = await client.scan_keys(pattern)
        except StoreOperationError as e:
            self._handle_store_error("cache_pattern_scan_failed", e, pattern=pattern)
            return 0

        deleted = 0
        for key in keys:
            try:
                deleted += await client.delete(key)
            except StoreOperationError as e:
                self._handle_store_error("cache_pattern_delete_failed", e, pattern=pattern, key=key)

        logger.info("cache_pattern_cleared", pattern=pattern, count=deleted)
        return deleted

    async def stats(self) -> dict[str, str]:
        """
        Memory statistics reported by Redis.

        Returns:
            INFO memory fields as strings, {"status": "unavailable"} when disabled,
            or an empty mapping if the store could not be queried
        """
        if not isinstance(self.backend, Connected):
            return {"status": "unavailable"}

        try:
            info = await self.backend.client.info("memory")
        except StoreOperationError as e:
            self._handle_store_error("cache_stats_failed", e)
            return {}

        return {str(name): str(value) for name, value in info.items()}
