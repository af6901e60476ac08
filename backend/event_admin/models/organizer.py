"""Organizer link tables: which categories host an event."""
from sqlalchemy import Column, String, ForeignKey
from event_admin.database import Base


class EventOrganizingMeetingCategory(Base):
    __tablename__ = "event_organizing_commissions"

    event_id = Column(String(36), ForeignKey("events.id"), primary_key=True)
    commission_id = Column(String(36), ForeignKey("commissions.id"), primary_key=True)


class EventOrganizingCategory(Base):
    __tablename__ = "event_organizing_categories"

    event_id = Column(String(36), ForeignKey("events.id"), primary_key=True)
    category_id = Column(String(36), ForeignKey("event_categories.id"), primary_key=True)
