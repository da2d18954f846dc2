"""
Basic caching example.

Looks up a user profile through the cache, computing and caching it on a
miss, then shows manual set/get and cache statistics.

Usage:
    REDIS_URL=redis://localhost:6379 python examples/basic_caching.py
"""

import asyncio

from pydantic import BaseModel

from shared_redis.cache import CachedResponse, CacheManager
from shared_redis.config import configure_logging, get_logger

logger = get_logger(__name__)


class UserRequest(BaseModel):
    user_id: int
    include_preferences: bool


class UserProfile(BaseModel):
    id: int
    name: str
    email: str
    preferences: list[str]


async def load_user_profile(request: UserRequest) -> UserProfile:
    # Stand-in for a slow database query
    await asyncio.sleep(0.1)
    return UserProfile(
        id=request.user_id,
        name=f"User {request.user_id}",
        email=f"user{request.user_id}@example.com",
        preferences=["theme", "language"] if request.include_preferences else [],
    )


async def main() -> None:
    configure_logging()
    cache = await CacheManager.create()

    if not cache.is_available():
        logger.warning("example_running_without_cache")

    request = UserRequest(user_id=123, include_preferences=True)

    cached = await cache.get_cached_response("user_profile", request, model=UserProfile)
    if cached is not None:
        logger.info("profile_from_cache", cached_at=cached.cached_at.isoformat())
        profile = cached.payload
    else:
        profile = await load_user_profile(request)
        result = await cache.cache_response_with_status("user_profile", request, profile)
        logger.info("profile_computed", cache_key=result.envelope.cache_key, stored=result.stored)

    logger.info("profile", profile=profile.model_dump())

    manual_key = "manual:user:123"
    envelope = CachedResponse(payload=profile, cache_key=manual_key)
    await cache.set(manual_key, envelope)

    manual = await cache.get(manual_key, model=UserProfile)
    if manual is not None:
        logger.info("manual_entry", name=manual.payload.name)

    logger.info("cache_stats", **await cache.stats())
    await cache.close()


if __name__ == "__main__":
    asyncio.run(main())
