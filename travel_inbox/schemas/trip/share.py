from pydantic import BaseModel
from typing import Optional, List
from datetime import date as dt
from travel_inbox.models.items.saved_item import ItemCategory
from travel_inbox.models.trips.trip_model import SharePrivacy


class ShareLinkCreate(BaseModel):
    privacy: SharePrivacy = SharePrivacy.full


class ShareLinkResponse(BaseModel):
    trip_id: int
    share_token: str
    share_privacy: SharePrivacy
    share_url: str


class SharedItem(BaseModel):
    title: str
    image_url: Optional[str] = None
    category: ItemCategory
    city: Optional[str] = None
    notes: Optional[str] = None


class SharedDay(BaseModel):
    day_index: Optional[int] = None
    date: Optional[dt] = None
    items: List[SharedItem] = []


class SharedTripView(BaseModel):
    """Read-only projection served to anonymous viewers. Never carries owner,
    companion, comment or vote data."""
    title: str
    privacy: SharePrivacy
    cities: List[str] = []
    start_date: Optional[dt] = None
    end_date: Optional[dt] = None
    days: Optional[List[SharedDay]] = None
    unassigned: Optional[SharedDay] = None


class AdoptResponse(BaseModel):
    trip_id: int
    forked_from_trip_id: int
    items_copied: int
