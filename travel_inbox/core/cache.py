import json
from typing import Any, Optional
import redis.asyncio as redis


class RedisCache:
    """JSON values in Redis. Passing a version suffixes the key with it, so
    bumping the version makes every older entry unreachable."""

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client

    @staticmethod
    def _versioned(key: str, version: Optional[int]) -> str:
        return key if version is None else f"{key}:v{version}"

    async def get(self, key: str, version: Optional[int] = None) -> Optional[Any]:
        raw = await self.redis.get(self._versioned(key, version))
        return json.loads(raw) if raw else None

    async def set(self, key: str, value: Any, expire: int = 3600, version: Optional[int] = None) -> None:
        await self.redis.set(self._versioned(key, version), json.dumps(value, default=str), ex=expire)

    async def bump_version(self, key: str, expire: int = 86400) -> int:
        """INCR the counter at key and refresh its TTL; returns the new value."""
        new_version = await self.redis.incr(key)
        await self.redis.expire(key, expire)
        return new_version

    @staticmethod
    def build_key(*parts) -> str:
        return ":".join(str(part) for part in parts)
