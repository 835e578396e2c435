# travel_inbox/core/redis_lifecycle.py
from typing import AsyncGenerator, Optional
import redis.asyncio as redis
from travel_inbox.core.cache import RedisCache
from travel_inbox.core.config import settings
from travel_inbox.core.logger import logger

_redis_client: Optional[redis.Redis] = None
_cache: Optional[RedisCache] = None


async def init_redis_client(url: str = settings.REDIS_URL) -> redis.Redis:
    """Connect once at startup; later calls reuse the client."""
    global _redis_client

    if _redis_client is None:
        client = redis.from_url(url, decode_responses=True)
        try:
            await client.ping()
        except redis.ConnectionError as e:
            logger.error(f"Redis unreachable at {url}: {e}")
            raise RuntimeError("Could not connect to Redis server") from None
        _redis_client = client
        logger.info("Redis connected")

    return _redis_client


async def get_cache() -> AsyncGenerator[RedisCache, None]:
    """Shared RedisCache for request handlers."""
    global _cache

    if _cache is None:
        _cache = RedisCache(await init_redis_client())

    yield _cache


async def close_redis() -> None:
    global _redis_client, _cache
    if _redis_client is not None:
        await _redis_client.aclose()
        logger.info("Redis connection closed")
    _redis_client = None
    _cache = None
