"""Event ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Text, Date, Time, DateTime, Integer, Float, Boolean, Enum as SAEnum
from sqlalchemy.sql import func
from event_admin.database import Base


class OrganizerType(str, enum.Enum):
    meeting_category = "meeting_category"
    category = "category"


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    subject = Column(String(255), nullable=False)
    # Selects the organizer link table; NULL on rows written before the tag existed
    organizer_kind = Column(SAEnum(OrganizerType), nullable=True)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=True)
    location = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    external_participants_count = Column(Integer, nullable=True, default=0)
    cost = Column(Float, nullable=True)
    investment = Column(Float, nullable=True)
    revenue = Column(Float, nullable=True)
    is_cancelled = Column(Boolean, nullable=False, default=False)
    flyer_url = Column(String(500), nullable=True)
    created_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_by = Column(String(36), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
