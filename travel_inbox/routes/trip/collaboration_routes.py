from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from travel_inbox.core.database import get_db
from travel_inbox.dependencies.auth import get_current_user
from travel_inbox.models.user.user import User
from travel_inbox.schemas.trip.collaboration import CommentCreate, CommentOut, VoteResult, VoteTally
from travel_inbox.services.trips.collaboration_service import (
    add_comment, list_comments, delete_comment, toggle_vote, vote_tally
)

router = APIRouter(tags=["Comments & Votes"])


@router.get("/trips/{trip_id}/items/{item_id}/comments", response_model=list[CommentOut])
async def get_item_comments(
    trip_id: int,
    item_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await list_comments(db, trip_id, item_id, current_user.id)


@router.post("/trips/{trip_id}/items/{item_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
async def post_item_comment(
    trip_id: int,
    item_id: int,
    payload: CommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await add_comment(db, trip_id, item_id, current_user.id, payload)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await delete_comment(db, comment_id, current_user.id)


@router.post("/trips/{trip_id}/items/{item_id}/vote", response_model=VoteResult)
async def vote_for_item(
    trip_id: int,
    item_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await toggle_vote(db, trip_id, item_id, current_user.id)


@router.get("/trips/{trip_id}/votes", response_model=VoteTally)
async def get_trip_votes(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await vote_tally(db, trip_id, current_user.id)
