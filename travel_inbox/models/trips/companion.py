from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from travel_inbox.core.database import Base
from datetime import datetime
import enum
import sqlalchemy as sa


class CompanionRole(enum.Enum):
    COMPANION = "companion"


class Companion(Base):
    __tablename__ = "companions"

    id = Column(Integer, primary_key=True, index=True)

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    companionrole_enum = sa.Enum(
        CompanionRole,
        name="companionrole",
        values_callable=lambda obj: [e.value for e in obj]
    )
    role = Column(companionrole_enum, nullable=False, default=CompanionRole.COMPANION)

    invited_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("trip_id", "user_id", name="uq_companion_trip_user"),
    )

    trip = relationship("Trip", back_populates="companions")
    user = relationship("User", back_populates="companionships")
