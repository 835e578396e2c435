from datetime import datetime
from typing import List
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from travel_inbox.core.errors import AlreadyCompanionError, InvalidInputError, UpstreamUnavailableError
from travel_inbox.core.logger import logger
from travel_inbox.models.trips.companion import Companion, CompanionRole
from travel_inbox.models.trips.pending_invite import PendingInvite
from travel_inbox.schemas.trip.companion import InviteResult
from travel_inbox.services.analytics.analytics_service import AnalyticsService
from travel_inbox.services.trips.account_directory import AccountDirectory
from travel_inbox.services.trips.email_invite import InvitationMailer, generate_trip_link
from travel_inbox.services.trips.trip_access import get_trip_for_owner, is_companion


def normalize_email(email: str) -> str:
    normalized = (email or "").strip().lower()
    if not normalized or "@" not in normalized:
        raise InvalidInputError("Please enter a valid email address.")
    return normalized


class CompanionService:
    """Inviting co-travellers by email.

    unknown -> member   when the email already has an account (Companion row)
    unknown -> invited  otherwise (email sent, PendingInvite row)
    invited -> member   later, via redeem_pending_invites() at sign-up
    """

    def __init__(self, directory: AccountDirectory, mailer: InvitationMailer, analytics: AnalyticsService):
        self.directory = directory
        self.mailer = mailer
        self.analytics = analytics

    async def invite(self, db: AsyncSession, trip_id: int, inviter_id: int, email: str) -> InviteResult:
        trip = await get_trip_for_owner(db, trip_id, inviter_id)
        normalized = normalize_email(email)

        existing_user_id = await self.directory.find_by_email(normalized)
        if existing_user_id is not None:
            if existing_user_id == trip.owner_id:
                raise InvalidInputError("You already own this trip.")
            await self._add_companion(db, trip_id, existing_user_id)
            logger.info(f"User {existing_user_id} added as companion on trip {trip_id}")
            self.analytics.track("companion_invited", inviter_id, {"trip_id": trip_id, "result": "added"})
            return InviteResult(result="added", email=normalized, user_id=existing_user_id)

        # Nothing is recorded unless the email actually went out.
        sent = await self.mailer.send_invite(normalized, generate_trip_link(trip_id), trip.title)
        if not sent:
            raise UpstreamUnavailableError("Could not send the invitation email. Please try again.")

        # The email is already out; a failed write is logged, not raised.
        try:
            await self._upsert_pending_invite(db, trip_id, inviter_id, normalized)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Invite email sent but pending invite not stored for trip {trip_id}: {e}")

        logger.info(f"Pending invite for {normalized} on trip {trip_id}")
        self.analytics.track("companion_invited", inviter_id, {"trip_id": trip_id, "result": "invited"})
        return InviteResult(result="invited", email=normalized)

    async def _add_companion(self, db: AsyncSession, trip_id: int, user_id: int) -> Companion:
        if await is_companion(db, trip_id, user_id):
            raise AlreadyCompanionError()

        companion = Companion(
            trip_id=trip_id,
            user_id=user_id,
            role=CompanionRole.COMPANION,
            invited_at=datetime.utcnow(),
        )
        db.add(companion)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise AlreadyCompanionError()
        return companion

    async def _upsert_pending_invite(self, db: AsyncSession, trip_id: int, inviter_id: int, email: str) -> None:
        result = await db.execute(
            select(PendingInvite).where(PendingInvite.trip_id == trip_id, PendingInvite.email == email)
        )
        invite = result.scalar_one_or_none()
        if invite:
            invite.invited_by = inviter_id
            invite.invited_at = datetime.utcnow()
        else:
            db.add(PendingInvite(
                trip_id=trip_id,
                invited_by=inviter_id,
                email=email,
                invited_at=datetime.utcnow(),
            ))
        await db.commit()

    async def list_companions(self, db: AsyncSession, trip_id: int, owner_id: int) -> List[Companion]:
        await get_trip_for_owner(db, trip_id, owner_id)
        result = await db.execute(
            select(Companion)
            .options(selectinload(Companion.user))
            .where(Companion.trip_id == trip_id)
            .order_by(Companion.invited_at, Companion.id)
        )
        return list(result.scalars().all())

    async def list_pending_invites(self, db: AsyncSession, trip_id: int, owner_id: int) -> List[PendingInvite]:
        await get_trip_for_owner(db, trip_id, owner_id)
        result = await db.execute(
            select(PendingInvite)
            .where(PendingInvite.trip_id == trip_id)
            .order_by(PendingInvite.invited_at, PendingInvite.id)
        )
        return list(result.scalars().all())

    async def remove_companion(self, db: AsyncSession, trip_id: int, companion_id: int, owner_id: int) -> None:
        await get_trip_for_owner(db, trip_id, owner_id)
        result = await db.execute(
            select(Companion).where(Companion.id == companion_id, Companion.trip_id == trip_id)
        )
        companion = result.scalar_one_or_none()
        if companion is None:
            return
        await db.delete(companion)
        await db.commit()
        logger.info(f"Companion {companion_id} removed from trip {trip_id}")

    async def revoke_pending(self, db: AsyncSession, trip_id: int, invite_id: int, owner_id: int) -> None:
        await get_trip_for_owner(db, trip_id, owner_id)
        result = await db.execute(
            select(PendingInvite).where(PendingInvite.id == invite_id, PendingInvite.trip_id == trip_id)
        )
        invite = result.scalar_one_or_none()
        if invite is None:
            return
        await db.delete(invite)
        await db.commit()
        logger.info(f"Pending invite {invite_id} revoked on trip {trip_id}")


async def redeem_pending_invites(db: AsyncSession, user_id: int, email: str) -> List[Companion]:
    """Turn every pending invite for a freshly created account into a
    Companion row. Called by the sign-up flow; pairs that already exist are
    skipped."""
    normalized = normalize_email(email)
    result = await db.execute(select(PendingInvite).where(PendingInvite.email == normalized))
    invites = list(result.scalars().all())

    created: List[Companion] = []
    for invite in invites:
        if not await is_companion(db, invite.trip_id, user_id):
            companion = Companion(
                trip_id=invite.trip_id,
                user_id=user_id,
                role=CompanionRole.COMPANION,
                invited_at=invite.invited_at,
            )
            db.add(companion)
            created.append(companion)
        await db.delete(invite)

    await db.commit()
    if invites:
        logger.info(f"Redeemed {len(invites)} pending invites for user {user_id}")
    return created
