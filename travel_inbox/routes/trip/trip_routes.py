from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from travel_inbox.schemas.trip.trip_schema import TripCreate, TripUpdate, TripResponse, TripSchedule
from travel_inbox.models.user.user import User
from travel_inbox.core.database import get_db
from travel_inbox.core.redis_lifecycle import get_cache
from travel_inbox.dependencies.auth import get_current_user
from travel_inbox.services.analytics.analytics_service import get_analytics
from travel_inbox.services.trips.trip_service import TripService

router = APIRouter(prefix="/trips", tags=['Trips'])


async def get_trip_service(
    cache=Depends(get_cache),
    analytics=Depends(get_analytics)
) -> TripService:
    return TripService(cache, analytics)


@router.post("", response_model=TripResponse, status_code=201)
async def create_trip_route(
    trip: TripCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    trip_service: TripService = Depends(get_trip_service)
):
    return await trip_service.create_trip(db, trip, current_user.id)


@router.get("", response_model=list[TripResponse])
async def get_my_trips(
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    trip_service: TripService = Depends(get_trip_service)
):
    return await trip_service.list_trips(session, current_user.id)


@router.get("/shared-with-me", response_model=list[TripResponse])
async def get_trips_shared_with_me(
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    trip_service: TripService = Depends(get_trip_service)
):
    return await trip_service.list_shared_with_me(session, current_user.id)


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: int,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    trip_service: TripService = Depends(get_trip_service)
):
    return await trip_service.get_trip(session, current_user.id, trip_id)


@router.patch("/{trip_id}", response_model=TripResponse)
async def update_trip_route(
    trip_id: int,
    trip_update: TripUpdate,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    trip_service: TripService = Depends(get_trip_service)
):
    return await trip_service.update_trip(session, trip_id, trip_update, current_user.id)


@router.post("/{trip_id}/schedule", response_model=TripResponse)
async def schedule_trip_route(
    trip_id: int,
    schedule: TripSchedule,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    trip_service: TripService = Depends(get_trip_service)
):
    return await trip_service.schedule_trip(
        session, trip_id, current_user.id, schedule.start_date, schedule.end_date
    )


@router.post("/{trip_id}/unschedule", response_model=TripResponse)
async def unschedule_trip_route(
    trip_id: int,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    trip_service: TripService = Depends(get_trip_service)
):
    return await trip_service.unschedule_trip(session, trip_id, current_user.id)


@router.delete("/{trip_id}")
async def delete_trip_route(
    trip_id: int,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    trip_service: TripService = Depends(get_trip_service)
):
    return await trip_service.delete_trip(session, trip_id, current_user.id)
