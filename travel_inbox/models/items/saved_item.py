from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Text, Enum, JSON, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from travel_inbox.core.database import Base
import enum


class SourceType(str, enum.Enum):
    url = "url"
    screenshot = "screenshot"
    manual = "manual"


class ItemCategory(str, enum.Enum):
    restaurant = "restaurant"
    activity = "activity"
    hotel = "hotel"
    transit = "transit"
    general = "general"


# Display order for the category view
CATEGORY_ORDER = [
    ItemCategory.restaurant,
    ItemCategory.activity,
    ItemCategory.hotel,
    ItemCategory.transit,
    ItemCategory.general,
]


class SavedItem(Base):
    __tablename__ = "saved_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    source_type = Column(Enum(SourceType), nullable=False)
    source_url = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    site_name = Column(String, nullable=True)
    city = Column(String, nullable=True)
    category = Column(Enum(ItemCategory), nullable=False, default=ItemCategory.general)
    notes = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)
    is_archived = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    owner = relationship("User", back_populates="saved_items")
    trip_links = relationship("TripItem", back_populates="saved_item", cascade="all, delete", passive_deletes=True)

    __table_args__ = (
        Index("ix_saved_items_user_id_archived", "user_id", "is_archived"),
    )
