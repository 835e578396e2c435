from pydantic import BaseModel, EmailStr
from typing import Optional, List, Literal
from datetime import datetime


class CompanionInvite(BaseModel):
    email: EmailStr


class InviteResult(BaseModel):
    result: Literal["added", "invited"]
    email: str
    user_id: Optional[int] = None


class CompanionUser(BaseModel):
    id: int
    email: str
    display_name: Optional[str] = None

    model_config = {"from_attributes": True}


class CompanionOut(BaseModel):
    id: int
    trip_id: int
    user_id: int
    role: str
    invited_at: datetime
    user: CompanionUser

    model_config = {"from_attributes": True}


class PendingInviteOut(BaseModel):
    id: int
    trip_id: int
    invited_by: int
    email: str
    invited_at: datetime

    model_config = {"from_attributes": True}


class CompanionListResponse(BaseModel):
    companions: List[CompanionOut]
