"""Pydantic schemas for Participants and Meetings."""
from __future__ import annotations
import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field


class ParticipantCreate(BaseModel):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    meeting_category_ids: list[str] = []


class Participant(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    is_active: bool = True
    created_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class MeetingCreate(BaseModel):
    subject: str = Field(min_length=1)
    meeting_category_id: str
    date: dt.date
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    location: Optional[str] = None
    description: Optional[str] = None
    external_participants_count: Optional[int] = Field(None, ge=0)
    is_cancelled: bool = False


class Meeting(MeetingCreate):
    id: str
    created_by: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_by: Optional[str] = None
    updated_at: Optional[dt.datetime] = None


class Company(BaseModel):
    """Directory entry offered when an event is held for a specific company."""
    id: str
    name: str
    tax_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    municipality: Optional[str] = None
    is_affiliated: bool = False
