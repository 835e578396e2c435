from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from travel_inbox.core.database import Base


class TripItem(Base):
    """A saved item placed on a trip. day_index is 1-based; NULL means the
    item sits in the unassigned bucket."""
    __tablename__ = "trip_items"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    item_id = Column(Integer, ForeignKey("saved_items.id", ondelete="CASCADE"), nullable=False)
    day_index = Column(Integer, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    trip = relationship("Trip", back_populates="items")
    saved_item = relationship("SavedItem", back_populates="trip_links")

    __table_args__ = (
        UniqueConstraint("trip_id", "item_id", name="uq_trip_item"),
        Index("ix_trip_items_trip_day", "trip_id", "day_index"),
    )
