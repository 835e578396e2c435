from typing import List, Optional, Tuple
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from travel_inbox.core.cache import RedisCache
from travel_inbox.core.errors import ConflictError, InvalidInputError, NotFoundError
from travel_inbox.core.logger import logger
from travel_inbox.models.items.saved_item import SavedItem
from travel_inbox.models.trips.trip_item import TripItem
from travel_inbox.models.trips.trip_model import Trip, TripStatus
from travel_inbox.services.analytics.analytics_service import AnalyticsService
from travel_inbox.services.itineraries import views
from travel_inbox.services.trips.trip_access import get_trip_for_owner, get_trip_for_viewer
from travel_inbox.services.trips.trip_cache import invalidate_trips


async def load_trip_items(db: AsyncSession, trip_id: int) -> List[TripItem]:
    result = await db.execute(
        select(TripItem)
        .options(selectinload(TripItem.saved_item))
        .where(TripItem.trip_id == trip_id)
        .order_by(TripItem.sort_order, TripItem.id)
    )
    return list(result.scalars().all())


class ItineraryService:
    """Attachment, day placement and ordering of saved items on a trip."""

    def __init__(self, cache: RedisCache, analytics: AnalyticsService):
        self.cache = cache
        self.analytics = analytics

    async def _get_trip_item(self, db: AsyncSession, trip_id: int, trip_item_id: int) -> TripItem:
        result = await db.execute(
            select(TripItem)
            .options(selectinload(TripItem.saved_item))
            .where(TripItem.id == trip_item_id, TripItem.trip_id == trip_id)
        )
        trip_item = result.scalar_one_or_none()
        if not trip_item:
            raise NotFoundError("Trip item not found")
        return trip_item

    async def _find_attachment(self, db: AsyncSession, trip_id: int, item_id: int) -> Optional[TripItem]:
        result = await db.execute(
            select(TripItem)
            .options(selectinload(TripItem.saved_item))
            .where(TripItem.trip_id == trip_id, TripItem.item_id == item_id)
        )
        return result.scalar_one_or_none()

    async def attach_item(self, db: AsyncSession, trip_id: int, item_id: int, user_id: int) -> Tuple[TripItem, bool]:
        """Put a saved item on a trip, at the end of the unassigned bucket.

        Returns (trip_item, already_added). Attaching twice is not an error;
        the existing row comes back with already_added=True.
        """
        trip = await get_trip_for_owner(db, trip_id, user_id)

        item = await db.get(SavedItem, item_id)
        if item is None or item.user_id != user_id:
            raise NotFoundError("Item not found")

        existing = await self._find_attachment(db, trip_id, item_id)
        if existing:
            logger.info(f"Item {item_id} already on trip {trip_id}")
            return existing, True

        # Stale day indices count as unassigned, the same as in the day view
        rows = await db.execute(
            select(TripItem.day_index, TripItem.sort_order).where(TripItem.trip_id == trip_id)
        )
        unassigned_orders = [
            sort_order for day_index, sort_order in rows.all()
            if not views.is_placed(day_index, trip.day_count)
        ]
        next_order = max(unassigned_orders) + 1 if unassigned_orders else 0

        db.add(TripItem(trip_id=trip_id, item_id=item_id, day_index=None, sort_order=next_order))
        try:
            await db.commit()
        except IntegrityError:
            # Lost a race with a concurrent attach of the same pair
            await db.rollback()
            existing = await self._find_attachment(db, trip_id, item_id)
            if existing is None:
                raise
            return existing, True

        await invalidate_trips(self.cache, trip_id)
        trip_item = await self._find_attachment(db, trip_id, item_id)
        logger.info(f"Item {item_id} attached to trip {trip_id} at position {next_order}")
        return trip_item, False

    async def list_trip_items(self, db: AsyncSession, trip_id: int, user_id: int,
                              search: Optional[str] = None) -> List[TripItem]:
        await get_trip_for_viewer(db, trip_id, user_id)
        return views.filter_items(await load_trip_items(db, trip_id), search)

    async def assign_to_day(self, db: AsyncSession, trip_id: int, trip_item_id: int,
                            day_index: Optional[int], user_id: int) -> TripItem:
        """Move an item to a day (1-based) or back to unassigned (None).

        sort_order travels with the item unchanged; ties in the target bucket
        are resolved by id until the caller reorders.
        """
        trip = await get_trip_for_owner(db, trip_id, user_id)
        self._validate_day(trip, day_index)

        trip_item = await self._get_trip_item(db, trip_id, trip_item_id)
        trip_item.day_index = day_index
        await db.commit()
        await invalidate_trips(self.cache, trip_id)

        logger.info(f"Trip item {trip_item_id} on trip {trip_id} assigned to day {day_index}")
        if day_index is not None:
            self.analytics.track("item_assigned_to_day", user_id, {
                "trip_id": trip_id,
                "trip_item_id": trip_item_id,
                "day_index": day_index,
            })
        return trip_item

    @staticmethod
    def _validate_day(trip: Trip, day_index: Optional[int]) -> None:
        if day_index is None:
            return
        if trip.status != TripStatus.scheduled:
            raise InvalidInputError("Schedule the trip before assigning items to days.")
        if day_index < 1 or day_index > trip.day_count:
            raise InvalidInputError(f"Day must be between 1 and {trip.day_count}.")

    async def reorder(self, db: AsyncSession, trip_id: int, ordered_ids: List[int], user_id: int) -> List[TripItem]:
        """Rewrite sort_order to 0..n-1 following ordered_ids.

        All ids must be on this trip and in one bucket of the day view, where
        stale day indices count as unassigned. The batch commits as one
        transaction; on failure nothing is applied and the caller is expected
        to reload.
        """
        trip = await get_trip_for_owner(db, trip_id, user_id)
        if not ordered_ids:
            return []
        if len(set(ordered_ids)) != len(ordered_ids):
            raise InvalidInputError("Each item may appear only once in a reorder.")

        result = await db.execute(
            select(TripItem)
            .options(selectinload(TripItem.saved_item))
            .where(TripItem.trip_id == trip_id, TripItem.id.in_(ordered_ids))
        )
        by_id = {trip_item.id: trip_item for trip_item in result.scalars().all()}
        missing = [trip_item_id for trip_item_id in ordered_ids if trip_item_id not in by_id]
        if missing:
            raise NotFoundError("Trip item not found")

        buckets = {
            trip_item.day_index if views.is_placed(trip_item.day_index, trip.day_count) else None
            for trip_item in by_id.values()
        }
        if len(buckets) != 1:
            raise InvalidInputError("Items to reorder must all be in the same day.")

        try:
            for position, trip_item_id in enumerate(ordered_ids):
                by_id[trip_item_id].sort_order = position
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Reorder on trip {trip_id} failed, nothing applied: {e}")
            raise ConflictError("Reorder failed. Reload the trip and try again.")

        await invalidate_trips(self.cache, trip_id)
        logger.info(f"Reordered {len(ordered_ids)} items in day {buckets.pop()} of trip {trip_id}")
        return [by_id[trip_item_id] for trip_item_id in ordered_ids]

    async def remove_item(self, db: AsyncSession, trip_id: int, trip_item_id: int, user_id: int) -> None:
        """Delete the join row only; the saved item is never touched. Removing
        something already gone succeeds."""
        await get_trip_for_owner(db, trip_id, user_id)

        result = await db.execute(
            select(TripItem).where(TripItem.id == trip_item_id, TripItem.trip_id == trip_id)
        )
        trip_item = result.scalar_one_or_none()
        if trip_item is None:
            return

        await db.delete(trip_item)
        await db.commit()
        await invalidate_trips(self.cache, trip_id)
        logger.info(f"Trip item {trip_item_id} removed from trip {trip_id}")

    async def group_by_day(self, db: AsyncSession, trip_id: int, user_id: int):
        trip = await get_trip_for_viewer(db, trip_id, user_id)
        days, unassigned = views.group_by_day(await load_trip_items(db, trip_id), trip.day_count)
        return trip, days, unassigned

    async def group_by_category(self, db: AsyncSession, trip_id: int, user_id: int, search: Optional[str] = None):
        await get_trip_for_viewer(db, trip_id, user_id)
        trip_items = views.filter_items(await load_trip_items(db, trip_id), search)
        return views.group_by_category(trip_items)
