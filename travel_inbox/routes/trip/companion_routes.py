from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from travel_inbox.core.database import get_db
from travel_inbox.dependencies.auth import get_current_user
from travel_inbox.models.user.user import User
from travel_inbox.schemas.trip.companion import (
    CompanionInvite, CompanionListResponse, CompanionOut, InviteResult, PendingInviteOut
)
from travel_inbox.services.analytics.analytics_service import get_analytics
from travel_inbox.services.trips.account_directory import AccountDirectory
from travel_inbox.services.trips.companion_service import CompanionService
from travel_inbox.services.trips.email_invite import get_mailer

router = APIRouter(prefix="/trips", tags=["Companions"])


async def get_companion_service(
    mailer=Depends(get_mailer),
    analytics=Depends(get_analytics)
) -> CompanionService:
    return CompanionService(AccountDirectory(), mailer, analytics)


@router.post("/{trip_id}/companions/invite", response_model=InviteResult)
async def invite_companion(
    trip_id: int,
    payload: CompanionInvite,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    companion_service: CompanionService = Depends(get_companion_service)
):
    return await companion_service.invite(db, trip_id, current_user.id, payload.email)


@router.get("/{trip_id}/companions", response_model=CompanionListResponse)
async def list_companions(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    companion_service: CompanionService = Depends(get_companion_service)
):
    companions = await companion_service.list_companions(db, trip_id, current_user.id)
    return CompanionListResponse(companions=[CompanionOut.model_validate(c) for c in companions])


@router.delete("/{trip_id}/companions/{companion_id}", status_code=204)
async def remove_companion(
    trip_id: int,
    companion_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    companion_service: CompanionService = Depends(get_companion_service)
):
    await companion_service.remove_companion(db, trip_id, companion_id, current_user.id)


@router.get("/{trip_id}/pending-invites", response_model=list[PendingInviteOut])
async def list_pending_invites(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    companion_service: CompanionService = Depends(get_companion_service)
):
    return await companion_service.list_pending_invites(db, trip_id, current_user.id)


@router.delete("/{trip_id}/pending-invites/{invite_id}", status_code=204)
async def revoke_pending_invite(
    trip_id: int,
    invite_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    companion_service: CompanionService = Depends(get_companion_service)
):
    await companion_service.revoke_pending(db, trip_id, invite_id, current_user.id)
