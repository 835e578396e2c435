from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.sql import func
from travel_inbox.core.database import Base
from sqlalchemy.orm import relationship


class User(Base):
    """Account record. Authentication lives outside this service; rows here are
    what the bearer token's subject points at."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    saved_items = relationship("SavedItem", back_populates="owner", cascade="all, delete", passive_deletes=True)
    trips = relationship("Trip", back_populates="owner", cascade="all, delete", passive_deletes=True)
    companionships = relationship("Companion", back_populates="user", cascade="all, delete", passive_deletes=True)
