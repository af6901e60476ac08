"""Pydantic schemas for the management views."""
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel

from event_admin.schemas.category import Category
from event_admin.schemas.event import Event


class Affordances(BaseModel):
    create: bool = False
    update: bool = False
    delete: bool = False


class SidebarCount(BaseModel):
    id: str
    name: str
    count: int


class EventCard(BaseModel):
    event: Event
    organizer_name: str


class EventsView(BaseModel):
    period_label: str
    search: str = ""
    sidebar_meeting_categories: list[SidebarCount] = []
    sidebar_event_categories: list[SidebarCount] = []
    selected_organizer_type: Optional[str] = None
    selected_organizer_id: Optional[str] = None
    events: list[EventCard] = []
    affordances: Affordances


class CommitteeRow(BaseModel):
    category: Category
    meetings_count: int
    participants_count: int
    events_count: int


class CommitteesView(BaseModel):
    search: str = ""
    categories: list[CommitteeRow] = []
    affordances: Affordances
