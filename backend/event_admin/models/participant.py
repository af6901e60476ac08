"""Participant and participant/meeting-category membership ORM models."""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from event_admin.database import Base


class Participant(Base):
    __tablename__ = "participants"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    role = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_by = Column(String(36), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)


class ParticipantMeetingCategory(Base):
    __tablename__ = "participant_commissions"

    participant_id = Column(String(36), ForeignKey("participants.id"), primary_key=True)
    commission_id = Column(String(36), ForeignKey("commissions.id"), primary_key=True)
