from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from travel_inbox.core.database import get_db
from travel_inbox.core.redis_lifecycle import get_cache
from travel_inbox.dependencies.auth import get_current_user, get_optional_user
from travel_inbox.models.user.user import User
from travel_inbox.schemas.trip.share import AdoptResponse, ShareLinkCreate, ShareLinkResponse, SharedTripView
from travel_inbox.services.analytics.analytics_service import get_analytics
from travel_inbox.services.sharing.share_service import ShareService

router = APIRouter(tags=["Sharing"])


async def get_share_service(
    cache=Depends(get_cache),
    analytics=Depends(get_analytics)
) -> ShareService:
    return ShareService(cache, analytics)


@router.post("/trips/{trip_id}/share", response_model=ShareLinkResponse)
async def generate_share_link(
    trip_id: int,
    payload: ShareLinkCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    share_service: ShareService = Depends(get_share_service)
):
    return await share_service.generate_link(db, trip_id, current_user.id, payload.privacy)


# The one endpoint that works without a session.
@router.get("/share/{token}", response_model=SharedTripView)
async def view_shared_trip(
    token: str,
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
    share_service: ShareService = Depends(get_share_service)
):
    return await share_service.resolve(db, token, viewer.id if viewer else None)


@router.post("/share/{token}/adopt", response_model=AdoptResponse, status_code=201)
async def adopt_shared_trip(
    token: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    share_service: ShareService = Depends(get_share_service)
):
    return await share_service.adopt(db, token, current_user.id)
