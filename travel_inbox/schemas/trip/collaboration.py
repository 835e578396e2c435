from pydantic import BaseModel, Field
from typing import Optional, Dict, List
from datetime import datetime


class CommentCreate(BaseModel):
    body: str = Field(..., min_length=1, max_length=2000)


class CommentOut(BaseModel):
    id: int
    trip_id: int
    item_id: int
    user_id: int
    body: str
    created_at: datetime
    author_name: Optional[str] = None

    model_config = {"from_attributes": True}


class VoteResult(BaseModel):
    item_id: int
    voted: bool
    total: int


class VoteTally(BaseModel):
    trip_id: int
    counts: Dict[int, int]
    mine: List[int] = []
