from typing import Dict, List
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from travel_inbox.core.errors import NotFoundError, ForbiddenError
from travel_inbox.core.logger import logger
from travel_inbox.models.trips.collaboration import Comment, Vote
from travel_inbox.models.trips.trip_item import TripItem
from travel_inbox.schemas.trip.collaboration import CommentCreate, VoteResult, VoteTally
from travel_inbox.services.trips.trip_access import get_trip_for_viewer


async def _ensure_item_on_trip(db: AsyncSession, trip_id: int, item_id: int) -> None:
    result = await db.execute(
        select(TripItem.id).where(TripItem.trip_id == trip_id, TripItem.item_id == item_id)
    )
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Item is not on this trip")


async def add_comment(db: AsyncSession, trip_id: int, item_id: int, user_id: int,
                      comment_data: CommentCreate) -> Comment:
    await get_trip_for_viewer(db, trip_id, user_id)
    await _ensure_item_on_trip(db, trip_id, item_id)

    comment = Comment(trip_id=trip_id, item_id=item_id, user_id=user_id, body=comment_data.body.strip())
    db.add(comment)
    await db.commit()

    result = await db.execute(
        select(Comment).options(selectinload(Comment.author)).where(Comment.id == comment.id)
    )
    return result.scalar_one()


async def list_comments(db: AsyncSession, trip_id: int, item_id: int, user_id: int) -> List[Comment]:
    await get_trip_for_viewer(db, trip_id, user_id)
    result = await db.execute(
        select(Comment)
        .options(selectinload(Comment.author))
        .where(Comment.trip_id == trip_id, Comment.item_id == item_id)
        .order_by(Comment.created_at, Comment.id)
    )
    return list(result.scalars().all())


async def delete_comment(db: AsyncSession, comment_id: int, user_id: int) -> None:
    comment = await db.get(Comment, comment_id)
    if comment is None:
        return
    if comment.user_id != user_id:
        await get_trip_for_viewer(db, comment.trip_id, user_id)
        raise ForbiddenError("You can only delete your own comments")
    await db.delete(comment)
    await db.commit()
    logger.info(f"Comment {comment_id} deleted by user {user_id}")


async def toggle_vote(db: AsyncSession, trip_id: int, item_id: int, user_id: int) -> VoteResult:
    await get_trip_for_viewer(db, trip_id, user_id)
    await _ensure_item_on_trip(db, trip_id, item_id)

    vote = await db.get(Vote, (trip_id, item_id, user_id))
    if vote:
        await db.delete(vote)
        voted = False
    else:
        db.add(Vote(trip_id=trip_id, item_id=item_id, user_id=user_id))
        voted = True
    await db.commit()

    total = await db.scalar(
        select(func.count()).select_from(Vote).where(Vote.trip_id == trip_id, Vote.item_id == item_id)
    )
    return VoteResult(item_id=item_id, voted=voted, total=total or 0)


async def vote_tally(db: AsyncSession, trip_id: int, user_id: int) -> VoteTally:
    await get_trip_for_viewer(db, trip_id, user_id)
    result = await db.execute(
        select(Vote.item_id, func.count())
        .where(Vote.trip_id == trip_id)
        .group_by(Vote.item_id)
    )
    counts: Dict[int, int] = {item_id: count for item_id, count in result.all()}

    mine = await db.execute(
        select(Vote.item_id).where(Vote.trip_id == trip_id, Vote.user_id == user_id)
    )
    return VoteTally(trip_id=trip_id, counts=counts, mine=sorted(mine.scalars().all()))
