"""
Shared fixtures for shared-redis tests.
"""

import fnmatch
from collections.abc import AsyncIterator
from typing import Any

import pytest

from shared_redis.cache.backend import Connected
from shared_redis.cache.cache_manager import CacheManager
from shared_redis.cache.config import RedisSettings
from shared_redis.cache.redis_client import RedisClient

REDIS_ENV_VARS = (
    "REDIS_URL",
    "REDIS_HOST",
    "REDIS_PORT",
    "REDIS_USERNAME",
    "REDIS_PASSWORD",
    "REDIS_AUTH_PASSWORD",
    "CACHE_ENABLED",
    "CACHE_TTL_SECONDS",
    "CACHE_STORE_ERROR_POLICY",
    "IDEMPOTENT_EXPIRY_IN_SEC",
)


class InMemoryRedis:
    """
    Test double for the subset of redis.asyncio.Redis used by RedisClient.

    Values are stored as bytes like a client created with
    decode_responses=False. Time only moves when advance() is called.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._data: dict[str, bytes] = {}
        self._expires_at: dict[str, float] = {}
        self.published: list[tuple[str, Any]] = []

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def _purge(self, key: str) -> None:
        expires_at = self._expires_at.get(key)
        if expires_at is not None and expires_at <= self.now:
            self._data.pop(key, None)
            self._expires_at.pop(key, None)

    @staticmethod
    def _encode(value: Any) -> bytes:
        return value if isinstance(value, bytes) else str(value).encode("utf-8")

    async def ping(self) -> bool:
        return True

    async def get(self, key: str) -> bytes | None:
        self._purge(key)
        return self._data.get(key)

    async def set(
        self,
        key: str,
        value: Any,
        nx: bool = False,
        ex: int | None = None,
    ) -> bool | None:
        self._purge(key)
        if nx and key in self._data:
            return None
        self._data[key] = self._encode(value)
        self._expires_at.pop(key, None)
        if ex:
            self._expires_at[key] = self.now + ex
        return True

    async def setex(self, key: str, ttl: int, value: Any) -> bool:
        return bool(await self.set(key, value, ex=ttl))

    async def delete(self, *keys: str) -> int:
        deleted = 0
        for key in keys:
            self._purge(key)
            if self._data.pop(key, None) is not None:
                deleted += 1
            self._expires_at.pop(key, None)
        return deleted

    async def exists(self, *keys: str) -> int:
        count = 0
        for key in keys:
            self._purge(key)
            count += key in self._data
        return count

    async def expire(self, key: str, ttl: int) -> bool:
        self._purge(key)
        if key not in self._data:
            return False
        self._expires_at[key] = self.now + ttl
        return True

    async def scan_iter(self, match: str | None = None) -> AsyncIterator[bytes]:
        for key in list(self._data):
            self._purge(key)
            if key in self._data and (match is None or fnmatch.fnmatchcase(key, match)):
                yield key.encode("utf-8")

    async def info(self, section: str | None = None) -> dict[str, Any]:
        return {"used_memory": 1024 * len(self._data), "used_memory_human": "1.00K"}

    async def publish(self, channel: str, message: Any) -> int:
        self.published.append((channel, message))
        return 0

    async def aclose(self) -> None:
        return None


@pytest.fixture
def clean_env(monkeypatch):
    """Remove Redis-related environment variables for the test."""
    for name in REDIS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def redis_settings(clean_env):
    """Redis settings independent of the environment and .env files."""
    return RedisSettings(_env_file=None, cache_ttl_seconds=60)


@pytest.fixture
def memory_redis():
    """In-memory Redis test double."""
    return InMemoryRedis()


@pytest.fixture
def memory_client(memory_redis):
    """RedisClient wired to the in-memory double."""
    client = RedisClient(url="redis://localhost:6379")
    client._client = memory_redis
    return client


@pytest.fixture
def memory_cache(memory_client, redis_settings):
    """Connected cache manager backed by the in-memory double."""
    return CacheManager(Connected(memory_client), redis_settings)
