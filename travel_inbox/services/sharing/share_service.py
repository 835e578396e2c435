import secrets
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from travel_inbox.core.cache import RedisCache
from travel_inbox.core.config import settings
from travel_inbox.core.errors import NotFoundError
from travel_inbox.core.logger import logger
from travel_inbox.models.items.saved_item import SavedItem
from travel_inbox.models.trips.trip_item import TripItem
from travel_inbox.models.trips.trip_model import Trip, TripStatus, SharePrivacy
from travel_inbox.schemas.trip.share import (
    AdoptResponse, SharedDay, SharedItem, SharedTripView, ShareLinkResponse
)
from travel_inbox.services.analytics.analytics_service import AnalyticsService
from travel_inbox.services.itineraries import views
from travel_inbox.services.itineraries.itinerary_service import load_trip_items
from travel_inbox.services.trips.trip_access import get_trip_for_owner
from travel_inbox.services.trips.trip_cache import (
    current_trip_version, invalidate_trips, shared_view_key
)

# Fields copied when a shared item is adopted into another library
_ADOPTED_ITEM_FIELDS = (
    "source_type", "source_url", "image_url", "title", "description",
    "site_name", "city", "category", "notes", "tags",
)


def generate_share_token() -> str:
    return secrets.token_urlsafe(settings.SHARE_TOKEN_BYTES)


def share_url(token: str) -> str:
    return f"{settings.FRONTEND_BASE_URL}/s/{token}"


def _shared_item(trip_item: TripItem) -> SharedItem:
    item = trip_item.saved_item
    return SharedItem(
        title=item.title,
        image_url=item.image_url,
        category=item.category,
        city=item.city,
        notes=item.notes,
    )


def build_shared_view(trip: Trip, trip_items: List[TripItem]) -> SharedTripView:
    """Project a trip for anonymous viewers according to its privacy tier."""
    privacy = trip.share_privacy or SharePrivacy.full
    view = SharedTripView(
        title=trip.title,
        privacy=privacy,
        cities=views.unique_cities(trip_items),
    )

    scheduled = trip.status == TripStatus.scheduled
    if privacy in (SharePrivacy.city_dates, SharePrivacy.full) and scheduled:
        view.start_date = trip.start_date
        view.end_date = trip.end_date

    if privacy == SharePrivacy.full:
        days, unassigned = views.group_by_day(trip_items, trip.day_count)
        view.days = [
            SharedDay(
                day_index=day,
                date=trip.date_for_day(day),
                items=[_shared_item(trip_item) for trip_item in bucket],
            )
            for day, bucket in days.items()
        ]
        view.unassigned = SharedDay(items=[_shared_item(trip_item) for trip_item in unassigned])

    return view


class ShareService:
    def __init__(self, cache: RedisCache, analytics: AnalyticsService):
        self.cache = cache
        self.analytics = analytics

    async def generate_link(self, db: AsyncSession, trip_id: int, user_id: int,
                            privacy: SharePrivacy) -> ShareLinkResponse:
        """Mint a token on first share; afterwards only the tier changes. A
        token is never rotated, links already handed out keep working."""
        trip = await get_trip_for_owner(db, trip_id, user_id)

        first_share = trip.share_token is None
        if first_share:
            trip.share_token = generate_share_token()
        trip.share_privacy = privacy
        await db.commit()
        await db.refresh(trip)
        await invalidate_trips(self.cache, trip_id)

        logger.info(f"Trip {trip_id} shared as {privacy.value} (new token: {first_share})")
        self.analytics.track("trip_shared", user_id, {"trip_id": trip_id, "share_privacy": privacy.value})
        return ShareLinkResponse(
            trip_id=trip.id,
            share_token=trip.share_token,
            share_privacy=trip.share_privacy,
            share_url=share_url(trip.share_token),
        )

    async def _get_shared_trip(self, db: AsyncSession, token: str) -> Trip:
        result = await db.execute(select(Trip).where(Trip.share_token == token))
        trip = result.scalar_one_or_none()
        if not trip:
            logger.warning("Shared trip lookup with unknown token")
            raise NotFoundError("This share link is invalid or has expired.")
        return trip

    async def resolve(self, db: AsyncSession, token: str, viewer_id: Optional[int] = None) -> SharedTripView:
        trip = await self._get_shared_trip(db, token)

        version = await current_trip_version(self.cache, trip.id)
        cache_key = shared_view_key(trip.id)
        cached = await self.cache.get(cache_key, version=version)
        if cached:
            logger.info(f"Shared view for trip {trip.id} served from cache")
            view = SharedTripView.model_validate(cached)
        else:
            view = build_shared_view(trip, await load_trip_items(db, trip.id))
            await self.cache.set(
                cache_key,
                view.model_dump(mode="json"),
                expire=settings.SHARED_TRIP_CACHE_TTL_SECONDS,
                version=version,
            )

        self.analytics.track("share_link_opened", viewer_id, {
            "trip_id": trip.id,
            "share_privacy": view.privacy.value,
        })
        return view

    async def adopt(self, db: AsyncSession, token: str, user_id: int) -> AdoptResponse:
        """Copy a shared trip into the caller's library.

        Only what the tier discloses is copied: under `full` every item is
        duplicated with its day and position, under the city tiers the new
        trip is an empty shell. The source trip and its items are read only.
        """
        source = await self._get_shared_trip(db, token)
        privacy = source.share_privacy or SharePrivacy.full
        keep_dates = privacy != SharePrivacy.city_only and source.status == TripStatus.scheduled

        new_trip = Trip(
            owner_id=user_id,
            title=source.title,
            status=TripStatus.scheduled if keep_dates else TripStatus.draft,
            start_date=source.start_date if keep_dates else None,
            end_date=source.end_date if keep_dates else None,
            cover_image_url=source.cover_image_url if privacy == SharePrivacy.full else None,
            forked_from_trip_id=source.id,
        )
        db.add(new_trip)
        await db.flush()

        copied = 0
        if privacy == SharePrivacy.full:
            for trip_item in await load_trip_items(db, source.id):
                original = trip_item.saved_item
                item_copy = SavedItem(
                    user_id=user_id,
                    is_archived=False,
                    **{field: getattr(original, field) for field in _ADOPTED_ITEM_FIELDS},
                )
                db.add(item_copy)
                await db.flush()
                db.add(TripItem(
                    trip_id=new_trip.id,
                    item_id=item_copy.id,
                    day_index=trip_item.day_index,
                    sort_order=trip_item.sort_order,
                ))
                copied += 1

        await db.commit()
        logger.info(f"Trip {source.id} adopted by user {user_id} as trip {new_trip.id} ({copied} items)")
        self.analytics.track("trip_adopted", user_id, {"trip_id": source.id, "new_trip_id": new_trip.id})
        return AdoptResponse(trip_id=new_trip.id, forked_from_trip_id=source.id, items_copied=copied)
