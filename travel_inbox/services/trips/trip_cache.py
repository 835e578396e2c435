from travel_inbox.core.cache import RedisCache
from travel_inbox.core.logger import logger

SHARED_VIEW_PREFIX = "shared:trip"


def trip_version_key(trip_id: int) -> str:
    return f"trips:version:{trip_id}"


def shared_view_key(trip_id: int) -> str:
    return RedisCache.build_key(SHARED_VIEW_PREFIX, trip_id)


async def current_trip_version(cache: RedisCache, trip_id: int) -> int:
    return await cache.get(trip_version_key(trip_id)) or 0


async def invalidate_trips(cache: RedisCache, *trip_ids: int) -> None:
    """Bump the version of every trip whose shared projection may have changed."""
    for trip_id in set(trip_ids):
        await cache.bump_version(trip_version_key(trip_id))
        logger.info(f"Shared view cache invalidated for trip {trip_id}")
