from sqlalchemy import Column, Integer, String, Date, ForeignKey, Enum, DateTime, CheckConstraint, func
from travel_inbox.core.database import Base
from sqlalchemy.orm import relationship
from datetime import timedelta
import enum


class TripStatus(str, enum.Enum):
    draft = "draft"
    scheduled = "scheduled"


class SharePrivacy(str, enum.Enum):
    city_only = "city_only"
    city_dates = "city_dates"
    full = "full"


class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    status = Column(Enum(TripStatus), nullable=False, default=TripStatus.draft)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    cover_image_url = Column(String, nullable=True)

    share_token = Column(String, unique=True, index=True, nullable=True)
    share_privacy = Column(Enum(SharePrivacy), nullable=True)

    forked_from_trip_id = Column(Integer, ForeignKey("trips.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", back_populates="trips")
    items = relationship("TripItem", back_populates="trip", cascade="all, delete", passive_deletes=True)
    companions = relationship("Companion", back_populates="trip", cascade="all, delete", passive_deletes=True)
    pending_invites = relationship("PendingInvite", back_populates="trip", cascade="all, delete", passive_deletes=True)

    __table_args__ = (
        CheckConstraint(
            "(start_date IS NULL AND end_date IS NULL) OR (start_date IS NOT NULL AND end_date IS NOT NULL)",
            name="ck_trips_date_pair",
        ),
    )

    @property
    def day_count(self) -> int:
        if self.status != TripStatus.scheduled or not self.start_date or not self.end_date:
            return 0
        return (self.end_date - self.start_date).days + 1

    def date_for_day(self, day_index: int):
        """Calendar date of a 1-based day, or None on an unscheduled trip."""
        if not self.day_count:
            return None
        return self.start_date + timedelta(days=day_index - 1)
