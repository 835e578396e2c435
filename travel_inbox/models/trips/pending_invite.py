from sqlalchemy import Integer, Column, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from travel_inbox.core.database import Base
from datetime import datetime


class PendingInvite(Base):
    """Invitation sent to an email that has no account yet."""
    __tablename__ = "pending_invites"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    invited_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    email = Column(String, nullable=False, index=True)
    invited_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("trip_id", "email", name="uq_pending_invite_trip_email"),
    )

    trip = relationship("Trip", back_populates="pending_invites")
