"""Meeting ORM model."""
import uuid
from sqlalchemy import Column, String, Text, Date, Time, DateTime, Integer, Boolean, ForeignKey
from sqlalchemy.sql import func
from event_admin.database import Base


class Meeting(Base):
    __tablename__ = "meetings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    subject = Column(String(255), nullable=False)
    commission_id = Column(String(36), ForeignKey("commissions.id"), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    location = Column(String(255), nullable=True)
    external_participants_count = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    is_cancelled = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_by = Column(String(36), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
