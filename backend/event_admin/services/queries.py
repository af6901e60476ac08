"""Query accessors: one cached fetch-all per entity or relation.

Every accessor reads the whole table, maps rows to schemas and caches the
collection under its CacheKey for that key's freshness window. A store error
propagates and nothing is cached.
"""
import logging
from typing import Callable, Iterable, Optional, TypeVar

from event_admin import mappers
from event_admin.cache import CacheKey, QueryCache
from event_admin.models.attendee import AttendanceType
from event_admin.models.event import OrganizerType
from event_admin.schemas.category import Category
from event_admin.schemas.directory import Company, Meeting, Participant
from event_admin.schemas.event import Event, EventLinks
from event_admin.schemas.links import (
    AttendeeLink,
    InviteeLink,
    OrganizingCategoryLink,
    OrganizingMeetingCategoryLink,
    ParticipantMeetingCategoryLink,
)
from event_admin.services.links import unique
from event_admin.store import tables
from event_admin.store.base import Store, eq, in_

logger = logging.getLogger(__name__)

T = TypeVar("T")


def derive_organizer_type(
    event_id: str,
    meeting_category_event_ids: Iterable[str],
    category_event_ids: Iterable[str],
) -> OrganizerType:
    """Infer the organizer type of an untagged event from link membership.

    Meeting-category links win over category links; an event with neither
    defaults to ``meeting_category``.
    """
    if event_id in set(meeting_category_event_ids):
        return OrganizerType.meeting_category
    if event_id in set(category_event_ids):
        return OrganizerType.category
    return OrganizerType.meeting_category


class Queries:
    """Cached read access to every table the management views use."""

    def __init__(self, store: Store, cache: QueryCache):
        self._store = store
        self._cache = cache

    def _fetch(self, key: CacheKey, table: str, mapper: Callable[[dict], T]) -> list[T]:
        return self._cache.get_or_fetch(key, lambda: [mapper(row) for row in self._store.select(table)])

    def events(self) -> list[Event]:
        return self._cache.get_or_fetch(CacheKey.events, self._load_events)

    def _load_events(self) -> list[Event]:
        rows = self._store.select(tables.EVENTS)
        if all(row.get("organizer_kind") for row in rows):
            return [mappers.event_from_row(row) for row in rows]

        # Legacy rows carry no tag; fall back to link-table membership
        meeting_category_event_ids = {link.event_id for link in self.organizing_meeting_categories()}
        category_event_ids = {link.event_id for link in self.organizing_categories()}
        events = []
        for row in rows:
            derived = None
            if not row.get("organizer_kind"):
                derived = derive_organizer_type(row["id"], meeting_category_event_ids, category_event_ids)
            events.append(mappers.event_from_row(row, derived))
        return events

    def get_event(self, event_id: str) -> Optional[Event]:
        """Uncached single-event lookup."""
        rows = self._store.select(tables.EVENTS, [eq("id", event_id)])
        if not rows:
            return None
        row = rows[0]
        if row.get("organizer_kind"):
            return mappers.event_from_row(row)
        meeting_links = self._store.select(tables.ORGANIZING_MEETING_CATEGORIES, [eq("event_id", event_id)])
        category_links = self._store.select(tables.ORGANIZING_CATEGORIES, [eq("event_id", event_id)])
        derived = derive_organizer_type(
            event_id,
            [link["event_id"] for link in meeting_links],
            [link["event_id"] for link in category_links],
        )
        return mappers.event_from_row(row, derived)

    def meeting_categories(self) -> list[Category]:
        return self._fetch(CacheKey.meeting_categories, tables.MEETING_CATEGORIES, mappers.category_from_row)

    def event_categories(self) -> list[Category]:
        return self._fetch(CacheKey.event_categories, tables.EVENT_CATEGORIES, mappers.category_from_row)

    def organizing_meeting_categories(self) -> list[OrganizingMeetingCategoryLink]:
        return self._fetch(
            CacheKey.organizing_meeting_categories,
            tables.ORGANIZING_MEETING_CATEGORIES,
            mappers.organizing_meeting_category_from_row,
        )

    def organizing_categories(self) -> list[OrganizingCategoryLink]:
        return self._fetch(
            CacheKey.organizing_categories,
            tables.ORGANIZING_CATEGORIES,
            mappers.organizing_category_from_row,
        )

    def invitees(self) -> list[InviteeLink]:
        return self._fetch(CacheKey.invitees, tables.INVITEES, mappers.invitee_from_row)

    def attendees(self) -> list[AttendeeLink]:
        return self._fetch(CacheKey.attendees, tables.ATTENDEES, mappers.attendee_from_row)

    def participant_meeting_categories(self) -> list[ParticipantMeetingCategoryLink]:
        return self._fetch(
            CacheKey.participant_meeting_categories,
            tables.PARTICIPANT_MEETING_CATEGORIES,
            mappers.participant_meeting_category_from_row,
        )

    def meetings(self) -> list[Meeting]:
        return self._fetch(CacheKey.meetings, tables.MEETINGS, mappers.meeting_from_row)

    def participants(self) -> list[Participant]:
        return self._fetch(CacheKey.participants, tables.PARTICIPANTS, mappers.participant_from_row)

    def companies(self) -> list[Company]:
        return self._fetch(CacheKey.companies, tables.COMPANIES, mappers.company_from_row)

    def event_links(self, event: Event) -> EventLinks:
        """Current organizer / invitee / attendee selections of ``event``."""
        if event.organizer_type == OrganizerType.meeting_category:
            organizer_ids = [
                link.meeting_category_id for link in self.organizing_meeting_categories() if link.event_id == event.id
            ]
        else:
            organizer_ids = [link.category_id for link in self.organizing_categories() if link.event_id == event.id]
        attendees = [link for link in self.attendees() if link.event_id == event.id]
        return EventLinks(
            organizer_ids=organizer_ids,
            invitee_ids=[link.participant_id for link in self.invitees() if link.event_id == event.id],
            attendee_in_person_ids=[
                a.participant_id for a in attendees if a.attendance_type == AttendanceType.in_person
            ],
            attendee_online_ids=[a.participant_id for a in attendees if a.attendance_type == AttendanceType.online],
        )

    def suggest_invitee_ids(self, organizer_type: OrganizerType, organizer_ids: list[str]) -> list[str]:
        """Participants who attended earlier events of the given organizers. Uncached."""
        if not organizer_ids:
            return []
        if organizer_type == OrganizerType.meeting_category:
            links = self._store.select(tables.ORGANIZING_MEETING_CATEGORIES, [in_("commission_id", organizer_ids)])
        else:
            links = self._store.select(tables.ORGANIZING_CATEGORIES, [in_("category_id", organizer_ids)])
        past_event_ids = unique(link["event_id"] for link in links)
        if not past_event_ids:
            return []
        past_attendees = self._store.select(tables.ATTENDEES, [in_("event_id", past_event_ids)])
        return unique(row["participant_id"] for row in past_attendees)
