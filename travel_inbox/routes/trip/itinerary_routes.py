from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from travel_inbox.core.database import get_db
from travel_inbox.core.redis_lifecycle import get_cache
from travel_inbox.dependencies.auth import get_current_user
from travel_inbox.models.user.user import User
from travel_inbox.schemas.trip.trip_item import (
    AttachResult, CategoryBucket, CategoryGroupingResponse, DayAssignment, DayBucket,
    DayGroupingResponse, ReorderRequest, TripItemAttach, TripItemResponse
)
from travel_inbox.services.analytics.analytics_service import get_analytics
from travel_inbox.services.itineraries.itinerary_service import ItineraryService

router = APIRouter(prefix="/trips", tags=["Itinerary"])


async def get_itinerary_service(
    cache=Depends(get_cache),
    analytics=Depends(get_analytics)
) -> ItineraryService:
    return ItineraryService(cache, analytics)


@router.get("/{trip_id}/items", response_model=list[TripItemResponse])
async def list_trip_items(
    trip_id: int,
    search: Optional[str] = Query(None, description="Filter by title, city, notes or category"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    itinerary_service: ItineraryService = Depends(get_itinerary_service)
):
    return await itinerary_service.list_trip_items(db, trip_id, current_user.id, search)


@router.post("/{trip_id}/items", response_model=AttachResult)
async def attach_item(
    trip_id: int,
    payload: TripItemAttach,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    itinerary_service: ItineraryService = Depends(get_itinerary_service)
):
    trip_item, already_added = await itinerary_service.attach_item(db, trip_id, payload.item_id, current_user.id)
    return AttachResult(trip_item=TripItemResponse.model_validate(trip_item), already_added=already_added)


@router.patch("/{trip_id}/items/{trip_item_id}/day", response_model=TripItemResponse)
async def assign_item_to_day(
    trip_id: int,
    trip_item_id: int,
    payload: DayAssignment,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    itinerary_service: ItineraryService = Depends(get_itinerary_service)
):
    return await itinerary_service.assign_to_day(db, trip_id, trip_item_id, payload.day_index, current_user.id)


@router.post("/{trip_id}/items/reorder", response_model=list[TripItemResponse])
async def reorder_items(
    trip_id: int,
    payload: ReorderRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    itinerary_service: ItineraryService = Depends(get_itinerary_service)
):
    return await itinerary_service.reorder(db, trip_id, payload.trip_item_ids, current_user.id)


@router.delete("/{trip_id}/items/{trip_item_id}", status_code=204)
async def remove_trip_item(
    trip_id: int,
    trip_item_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    itinerary_service: ItineraryService = Depends(get_itinerary_service)
):
    await itinerary_service.remove_item(db, trip_id, trip_item_id, current_user.id)


@router.get("/{trip_id}/days", response_model=DayGroupingResponse)
async def get_trip_days(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    itinerary_service: ItineraryService = Depends(get_itinerary_service)
):
    trip, days, unassigned = await itinerary_service.group_by_day(db, trip_id, current_user.id)
    return DayGroupingResponse(
        trip_id=trip.id,
        day_count=trip.day_count,
        days=[
            DayBucket(
                day_index=day,
                date=trip.date_for_day(day),
                items=[TripItemResponse.model_validate(ti) for ti in bucket],
            )
            for day, bucket in days.items()
        ],
        unassigned=DayBucket(items=[TripItemResponse.model_validate(ti) for ti in unassigned]),
    )


@router.get("/{trip_id}/categories", response_model=CategoryGroupingResponse)
async def get_trip_categories(
    trip_id: int,
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    itinerary_service: ItineraryService = Depends(get_itinerary_service)
):
    buckets = await itinerary_service.group_by_category(db, trip_id, current_user.id, search)
    return CategoryGroupingResponse(
        trip_id=trip_id,
        categories=[
            CategoryBucket(category=category, items=[TripItemResponse.model_validate(ti) for ti in bucket])
            for category, bucket in buckets.items()
        ],
    )
