from pydantic import BaseModel, Field
from typing import Annotated, Optional, List, Literal, Union
from datetime import datetime
from travel_inbox.models.items.saved_item import SourceType, ItemCategory


# Kind-specific payloads. The shared fields live on SavedItemCreate.
class UrlSource(BaseModel):
    source_type: Literal["url"] = "url"
    source_url: str
    image_url: Optional[str] = None
    description: Optional[str] = None
    site_name: Optional[str] = None


class ScreenshotSource(BaseModel):
    source_type: Literal["screenshot"] = "screenshot"
    image_url: str  # storage reference of the uploaded screenshot


class ManualSource(BaseModel):
    source_type: Literal["manual"] = "manual"


ItemSource = Annotated[
    Union[UrlSource, ScreenshotSource, ManualSource],
    Field(discriminator="source_type"),
]


class SavedItemCreate(BaseModel):
    source: ItemSource
    title: Optional[str] = None
    category: ItemCategory = ItemCategory.general
    city: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None


class SavedItemUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    category: Optional[ItemCategory] = None
    city: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None


class SavedItemResponse(BaseModel):
    id: int
    user_id: int
    source_type: SourceType
    source_url: Optional[str] = None
    image_url: Optional[str] = None
    title: str
    description: Optional[str] = None
    site_name: Optional[str] = None
    city: Optional[str] = None
    category: ItemCategory
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    is_archived: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class LinkPreviewRequest(BaseModel):
    url: str


class LinkPreview(BaseModel):
    """Result of fetching a page. All fields None means the fetch failed and
    the user fills the details in by hand."""
    url: str
    title: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    site_name: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not any([self.title, self.image, self.description, self.site_name])
