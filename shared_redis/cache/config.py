"""
Configuration settings for the Redis cache.

Environment variable names are shared with the other services talking to the
same Redis deployment, so no prefix is applied.
"""

from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CACHE_TTL_SECONDS = 3600
DEFAULT_IDEMPOTENT_EXPIRY_SECONDS = 120


def _positive_int_or(value: Any, default: int) -> int:
    """Parse a positive integer, returning the default for anything else."""
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


class StoreErrorPolicy(str, Enum):
    """What the cache facade does when a store command fails."""

    LOG_AND_DEGRADE = "log_and_degrade"
    PROPAGATE = "propagate"


class RedisSettings(BaseSettings):
    """Settings for the Redis connection and cache behavior."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Connection settings
    redis_url: str | None = Field(
        default=None,
        description="Full Redis connection URL; overrides host/port/credentials",
    )

    redis_host: str = Field(
        default="127.0.0.1",
        description="Redis host",
    )

    redis_port: int = Field(
        default=6379,
        ge=1,
        le=65535,
        description="Redis port",
    )

    redis_username: str = Field(
        default="",
        description="Redis ACL username",
    )

    redis_password: str = Field(
        default="",
        description="Redis password",
    )

    redis_auth_password: str = Field(
        default="",
        description="Fallback password used when REDIS_PASSWORD is empty",
    )

    # Connection pool settings
    redis_max_connections: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum number of connections in pool",
    )

    redis_socket_timeout: float = Field(
        default=5.0,
        ge=0.1,
        description="Socket timeout in seconds",
    )

    redis_socket_connect_timeout: float = Field(
        default=5.0,
        ge=0.1,
        description="Socket connect timeout in seconds",
    )

    redis_decode_responses: bool = Field(
        default=False,
        description="Decode Redis responses to strings",
    )

    # Cache behavior settings
    cache_enabled: bool = Field(
        default=True,
        description="Enable caching; only the string 'true' (any case) enables it",
    )

    cache_ttl_seconds: int = Field(
        default=DEFAULT_CACHE_TTL_SECONDS,
        ge=1,
        description="TTL applied to every cache entry, in seconds",
    )

    cache_store_error_policy: StoreErrorPolicy = Field(
        default=StoreErrorPolicy.LOG_AND_DEGRADE,
        description="Whether store errors degrade to a miss or propagate",
    )

    idempotent_expiry_in_sec: int = Field(
        default=DEFAULT_IDEMPOTENT_EXPIRY_SECONDS,
        ge=1,
        description="Expiry for idempotency keys, in seconds",
    )

    @field_validator("cache_enabled", mode="before")
    @classmethod
    def parse_cache_enabled(cls, value: Any) -> Any:
        """Treat any string other than 'true' as disabled."""
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return value

    @field_validator("cache_ttl_seconds", mode="before")
    @classmethod
    def parse_cache_ttl(cls, value: Any) -> int:
        """Fall back to the default TTL unless the value is a positive integer."""
        return _positive_int_or(value, DEFAULT_CACHE_TTL_SECONDS)

    @field_validator("idempotent_expiry_in_sec", mode="before")
    @classmethod
    def parse_idempotent_expiry(cls, value: Any) -> int:
        """Fall back to the default expiry unless the value is a positive integer."""
        return _positive_int_or(value, DEFAULT_IDEMPOTENT_EXPIRY_SECONDS)

    @property
    def effective_password(self) -> str:
        """Password to authenticate with, honoring the REDIS_AUTH_PASSWORD fallback."""
        return self.redis_password or self.redis_auth_password

    @property
    def connection_url(self) -> str:
        """
        Build Redis connection URL from components.

        Returns:
            Redis connection URL
        """
        host = f"{self.redis_host}:{self.redis_port}"
        password = self.effective_password
        if password:
            if self.redis_username:
                return f"redis://{self.redis_username}:{password}@{host}"
            return f"redis://:{password}@{host}"
        return f"redis://{host}"

    def get_effective_url(self) -> str:
        """
        Get the effective Redis URL (REDIS_URL if set, otherwise built from components).

        Returns:
            Redis connection URL
        """
        if self.redis_url:
            return self.redis_url
        return self.connection_url


@lru_cache
def get_redis_settings() -> RedisSettings:
    """
    Get cached Redis settings instance.

    Returns:
        RedisSettings: Cached settings instance
    """
    return RedisSettings()
