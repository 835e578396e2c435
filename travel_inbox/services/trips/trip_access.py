from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from travel_inbox.core.errors import NotFoundError, ForbiddenError
from travel_inbox.core.logger import logger
from travel_inbox.models.trips.trip_model import Trip
from travel_inbox.models.trips.companion import Companion


async def is_companion(db: AsyncSession, trip_id: int, user_id: int) -> bool:
    result = await db.execute(select(Companion.id).where(
        Companion.trip_id == trip_id,
        Companion.user_id == user_id
    ))
    return result.scalar_one_or_none() is not None


async def get_trip_for_viewer(db: AsyncSession, trip_id: int, user_id: int) -> Trip:
    """Trip readable by its owner and its companions. Anyone else gets the
    same NotFound as for a missing trip."""
    trip = await db.get(Trip, trip_id)
    if trip is None:
        raise NotFoundError("Trip not found")

    if trip.owner_id != user_id and not await is_companion(db, trip_id, user_id):
        logger.warning(f"Trip {trip_id} not visible to user {user_id}")
        raise NotFoundError("Trip not found")
    return trip


async def get_trip_for_owner(db: AsyncSession, trip_id: int, user_id: int) -> Trip:
    trip = await get_trip_for_viewer(db, trip_id, user_id)
    if trip.owner_id != user_id:
        logger.warning(f"Companion {user_id} attempted an owner-only change on trip {trip_id}")
        raise ForbiddenError("Only the trip owner can do that")
    return trip
