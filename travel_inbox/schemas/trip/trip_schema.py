from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from travel_inbox.models.trips.trip_model import TripStatus, SharePrivacy


class TripCreate(BaseModel):
    title: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class TripUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    cover_image_url: Optional[str] = None


class TripSchedule(BaseModel):
    start_date: date
    end_date: date


class TripResponse(BaseModel):
    id: int
    owner_id: int
    title: str
    status: TripStatus
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    cover_image_url: Optional[str] = None
    share_token: Optional[str] = None
    share_privacy: Optional[SharePrivacy] = None
    forked_from_trip_id: Optional[int] = None
    day_count: int = 0
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
