"""Pydantic schemas for the event and participant link tables."""
from pydantic import BaseModel

from event_admin.models.attendee import AttendanceType


class OrganizingMeetingCategoryLink(BaseModel):
    event_id: str
    meeting_category_id: str


class OrganizingCategoryLink(BaseModel):
    event_id: str
    category_id: str


class InviteeLink(BaseModel):
    event_id: str
    participant_id: str


class AttendeeLink(BaseModel):
    event_id: str
    participant_id: str
    attendance_type: AttendanceType


class ParticipantMeetingCategoryLink(BaseModel):
    participant_id: str
    meeting_category_id: str
