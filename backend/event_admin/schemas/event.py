"""Pydantic schemas for Events."""
from __future__ import annotations
import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from event_admin.models.event import OrganizerType
from event_admin.schemas.schedule import ScheduleEntry


class EventDraft(BaseModel):
    """Event fields as edited in a form; date and times may still be unset."""
    subject: str = ""
    organizer_type: OrganizerType = OrganizerType.meeting_category
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    location: Optional[str] = None
    description: Optional[str] = None
    external_participants_count: int = Field(0, ge=0)
    cost: Optional[float] = None
    investment: Optional[float] = None
    revenue: Optional[float] = None
    is_cancelled: bool = False
    flyer_url: Optional[str] = None


class Event(EventDraft):
    id: str
    date: dt.date
    start_time: dt.time
    created_by: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_by: Optional[str] = None
    updated_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class EventLinks(BaseModel):
    organizer_ids: list[str] = []
    invitee_ids: list[str] = []
    attendee_in_person_ids: list[str] = []
    attendee_online_ids: list[str] = []


def _check_event_fields(event: EventDraft, require_slot: bool) -> None:
    if not event.subject.strip():
        raise ValueError("subject is required")
    if require_slot and (event.date is None or event.start_time is None):
        raise ValueError("date and start_time are required")
    if event.start_time and event.end_time and event.end_time <= event.start_time:
        raise ValueError("end_time must be after start_time")


class ComplexEventCreate(EventLinks):
    event: EventDraft
    schedules: list[ScheduleEntry] = []

    @model_validator(mode="after")
    def _validate(self):
        _check_event_fields(self.event, require_slot=not self.schedules)
        return self


class ComplexEventUpdate(EventLinks):
    event: EventDraft

    @model_validator(mode="after")
    def _validate(self):
        _check_event_fields(self.event, require_slot=True)
        return self


class EventDetail(EventLinks):
    event: Event
    organizer_name: str
