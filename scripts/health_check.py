"""
Health check script for the Redis deployment used by shared-redis.

Connects with the environment-derived settings, pings the server, and
reports cache memory statistics.

Usage:
    python scripts/health_check.py [--verbose] [--url redis://host:port]

Options:
    --verbose        Show detailed health check information
    --url            Override the connection URL (defaults to REDIS_URL or REDIS_HOST/PORT)
"""

import argparse
import asyncio
import sys

from shared_redis.cache import CacheManager, RedisSettings, get_redis_settings
from shared_redis.config import configure_logging

REPORTED_STATS = ("used_memory_human", "used_memory_peak_human", "maxmemory_policy")


class HealthCheckResult:
    """Result of a health check."""

    def __init__(self, service: str, healthy: bool, message: str, details: dict | None = None):
        self.service = service
        self.healthy = healthy
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        status = "✓" if self.healthy else "✗"
        return f"[{status}] {self.service}: {self.message}"


async def check_cache(settings: RedisSettings, verbose: bool = False) -> HealthCheckResult:
    """
    Check Redis cache connectivity.

    Args:
        settings: Redis settings to connect with
        verbose: Include every INFO memory field instead of a summary

    Returns:
        HealthCheckResult with connection status
    """
    if not settings.cache_enabled:
        return HealthCheckResult(
            service="Redis",
            healthy=True,
            message="Caching disabled (CACHE_ENABLED is not 'true')",
        )

    cache = await CacheManager.create(settings)
    try:
        if not cache.is_available():
            return HealthCheckResult(
                service="Redis",
                healthy=False,
                message="Connection failed, cache would run disabled",
            )

        stats = await cache.stats()
        if not verbose:
            stats = {name: stats[name] for name in REPORTED_STATS if name in stats}

        return HealthCheckResult(
            service="Redis",
            healthy=True,
            message=f"Connected successfully (ttl={settings.cache_ttl_seconds}s)",
            details=stats,
        )
    finally:
        await cache.close()


async def main_async(settings: RedisSettings, verbose: bool) -> int:
    """
    Async main entry point.

    Args:
        settings: Redis settings to connect with
        verbose: If True, show detailed information

    Returns:
        Exit code (0 if healthy, 1 otherwise)
    """
    result = await check_cache(settings, verbose)

    print(result)
    for key, value in result.details.items():
        print(f"  {key}: {value}")

    return 0 if result.healthy else 1


def main() -> int:
    """
    Main entry point for the script.

    Returns:
        Exit code (0 if healthy, 1 otherwise)
    """
    parser = argparse.ArgumentParser(description="Health check for the shared-redis cache")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show detailed health check information",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Redis connection URL (overrides REDIS_URL)",
    )

    args = parser.parse_args()
    configure_logging()

    settings = get_redis_settings()
    if args.url:
        settings = settings.model_copy(update={"redis_url": args.url})

    return asyncio.run(main_async(settings, args.verbose))


if __name__ == "__main__":
    sys.exit(main())
