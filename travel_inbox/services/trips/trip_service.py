from datetime import date
from typing import List, Optional
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from travel_inbox.core.cache import RedisCache
from travel_inbox.core.errors import InvalidInputError, InvalidDateRangeError
from travel_inbox.core.logger import logger
from travel_inbox.models.trips.trip_model import Trip, TripStatus
from travel_inbox.models.trips.companion import Companion
from travel_inbox.schemas.trip.trip_schema import TripCreate, TripUpdate
from travel_inbox.services.analytics.analytics_service import AnalyticsService
from travel_inbox.services.trips.trip_access import get_trip_for_owner, get_trip_for_viewer
from travel_inbox.services.trips.trip_cache import invalidate_trips


def validate_date_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise InvalidDateRangeError("End date must be on or after start date.")


class TripService:
    def __init__(self, cache: RedisCache, analytics: AnalyticsService):
        self.cache = cache
        self.analytics = analytics

    async def create_trip(self, db: AsyncSession, trip_data: TripCreate, user_id: int) -> Trip:
        title = (trip_data.title or "").strip()
        if not title:
            raise InvalidInputError("Trip title is required")

        # Status is decided here and only here: both dates -> scheduled.
        start_date, end_date = trip_data.start_date, trip_data.end_date
        if start_date and end_date:
            validate_date_range(start_date, end_date)
            status = TripStatus.scheduled
        else:
            start_date = end_date = None
            status = TripStatus.draft

        new_trip = Trip(
            owner_id=user_id,
            title=title,
            status=status,
            start_date=start_date,
            end_date=end_date,
        )
        db.add(new_trip)
        await db.commit()
        await db.refresh(new_trip)

        logger.info(f"Trip {new_trip.id} created by user {user_id} as {status.value}")
        self.analytics.track("trip_created", user_id, {"trip_id": new_trip.id, "status": status.value})
        return new_trip

    async def list_trips(self, db: AsyncSession, user_id: int) -> List[Trip]:
        result = await db.execute(
            select(Trip)
            .where(Trip.owner_id == user_id)
            .order_by(Trip.created_at.desc(), Trip.id.desc())
        )
        trips = list(result.scalars().all())
        logger.info(f"Retrieved {len(trips)} trips for user {user_id}")
        return trips

    async def list_shared_with_me(self, db: AsyncSession, user_id: int) -> List[Trip]:
        result = await db.execute(
            select(Trip)
            .join(Companion, Companion.trip_id == Trip.id)
            .where(Companion.user_id == user_id)
            .order_by(Companion.invited_at.desc(), Trip.id.desc())
        )
        return list(result.scalars().all())

    async def get_trip(self, db: AsyncSession, user_id: int, trip_id: int) -> Trip:
        return await get_trip_for_viewer(db, trip_id, user_id)

    async def update_trip(self, db: AsyncSession, trip_id: int, trip_data: TripUpdate, user_id: int) -> Trip:
        trip = await get_trip_for_owner(db, trip_id, user_id)

        update_data = trip_data.model_dump(exclude_unset=True)
        if "title" in update_data:
            title = (update_data["title"] or "").strip()
            if not title:
                raise InvalidInputError("Trip title is required")
            update_data["title"] = title

        for key, value in update_data.items():
            setattr(trip, key, value)

        await db.commit()
        await db.refresh(trip)
        await invalidate_trips(self.cache, trip_id)

        logger.info(f"Trip {trip_id} updated by user {user_id}")
        return trip

    async def schedule_trip(self, db: AsyncSession, trip_id: int, user_id: int,
                            start_date: Optional[date], end_date: Optional[date]) -> Trip:
        """draft -> scheduled, or a new date range on a scheduled trip.

        Trip items are left untouched: day indices beyond a shorter range stay
        stored and are shown as unassigned until the range grows again.
        """
        if not start_date or not end_date:
            raise InvalidInputError("Both dates are required to schedule a trip.")
        validate_date_range(start_date, end_date)

        trip = await get_trip_for_owner(db, trip_id, user_id)
        was_scheduled = trip.status == TripStatus.scheduled

        trip.status = TripStatus.scheduled
        trip.start_date = start_date
        trip.end_date = end_date
        await db.commit()
        await db.refresh(trip)
        await invalidate_trips(self.cache, trip_id)

        logger.info(f"Trip {trip_id} scheduled {start_date} - {end_date} ({trip.day_count} days)")
        self.analytics.track("trip_scheduled", user_id, {
            "trip_id": trip_id,
            "day_count": trip.day_count,
            "rescheduled": was_scheduled,
        })
        return trip

    async def unschedule_trip(self, db: AsyncSession, trip_id: int, user_id: int) -> Trip:
        """scheduled -> draft. Stored day indices are kept."""
        trip = await get_trip_for_owner(db, trip_id, user_id)

        trip.status = TripStatus.draft
        trip.start_date = None
        trip.end_date = None
        await db.commit()
        await db.refresh(trip)
        await invalidate_trips(self.cache, trip_id)

        logger.info(f"Trip {trip_id} moved back to draft by user {user_id}")
        return trip

    async def delete_trip(self, db: AsyncSession, trip_id: int, user_id: int) -> dict:
        await get_trip_for_owner(db, trip_id, user_id)

        # trip_items, companions and pending_invites go with it via ON DELETE CASCADE
        await db.execute(delete(Trip).where(Trip.id == trip_id))
        await db.commit()
        await invalidate_trips(self.cache, trip_id)

        logger.info(f"Trip {trip_id} deleted by user {user_id}")
        return {"msg": "Trip deleted successfully"}
