from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date as dt
from travel_inbox.models.items.saved_item import ItemCategory
from travel_inbox.schemas.items.saved_item import SavedItemResponse


class TripItemAttach(BaseModel):
    item_id: int


class DayAssignment(BaseModel):
    day_index: Optional[int] = Field(None, ge=1)


class ReorderRequest(BaseModel):
    trip_item_ids: List[int]


class TripItemResponse(BaseModel):
    id: int
    trip_id: int
    item_id: int
    day_index: Optional[int] = None
    sort_order: int
    saved_item: SavedItemResponse

    model_config = {"from_attributes": True}


class AttachResult(BaseModel):
    trip_item: TripItemResponse
    already_added: bool = False


class DayBucket(BaseModel):
    day_index: Optional[int] = None  # None for the unassigned bucket
    date: Optional[dt] = None
    items: List[TripItemResponse] = []


class DayGroupingResponse(BaseModel):
    trip_id: int
    day_count: int
    days: List[DayBucket]
    unassigned: DayBucket


class CategoryBucket(BaseModel):
    category: ItemCategory
    items: List[TripItemResponse] = []


class CategoryGroupingResponse(BaseModel):
    trip_id: int
    categories: List[CategoryBucket]
