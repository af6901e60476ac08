"""Derived view computations for the event and committee management screens.

Everything here is pure: inputs are the collections returned by the query
accessors, outputs are what the screens render.
"""
import enum
import re
import unicodedata
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from event_admin.models.event import OrganizerType
from event_admin.period import FiscalPeriod
from event_admin.schemas.category import Category
from event_admin.schemas.directory import Company, Meeting, Participant
from event_admin.schemas.event import Event
from event_admin.schemas.links import (
    OrganizingCategoryLink,
    OrganizingMeetingCategoryLink,
    ParticipantMeetingCategoryLink,
)
from event_admin.schemas.views import SidebarCount

MEETING_CATEGORY_UNSPECIFIED = "Meeting category not specified"
EVENT_CATEGORY_UNSPECIFIED = "Event category not specified"
UNKNOWN_MEETING_CATEGORY = "Unknown meeting category"
UNKNOWN_EVENT_CATEGORY = "Unknown category"
NO_MEETING_CATEGORY_GROUP = "No meeting category"

COMPANY_SEARCH_MIN_LENGTH = 3
COMPANY_SUGGESTION_LIMIT = 5

_SEARCH_PUNCTUATION = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()]")


class SelectionMode(str, enum.Enum):
    invitees = "invitees"
    attendees_in_person = "attendees_in_person"
    attendees_online = "attendees_online"


@dataclass(frozen=True)
class SelectorParticipant:
    id: str
    name: str
    group: str
    is_disabled: bool = False


def name_key(name: Optional[str]) -> str:
    return (name or "").casefold()


def organizer_pairs(
    organizer_type: OrganizerType,
    meeting_links: Iterable[OrganizingMeetingCategoryLink],
    category_links: Iterable[OrganizingCategoryLink],
) -> list[tuple[str, str]]:
    """``(event_id, category_id)`` pairs from the link table of ``organizer_type``."""
    if organizer_type == OrganizerType.meeting_category:
        return [(link.event_id, link.meeting_category_id) for link in meeting_links]
    return [(link.event_id, link.category_id) for link in category_links]


def organizer_display_name(
    event: Event,
    meeting_links: Sequence[OrganizingMeetingCategoryLink],
    category_links: Sequence[OrganizingCategoryLink],
    meeting_categories: Sequence[Category],
    event_categories: Sequence[Category],
) -> str:
    """Comma-joined names of the categories organizing ``event``; never empty."""
    if event.organizer_type == OrganizerType.meeting_category:
        names = {c.id: c.name for c in meeting_categories}
        unknown, unspecified = UNKNOWN_MEETING_CATEGORY, MEETING_CATEGORY_UNSPECIFIED
    else:
        names = {c.id: c.name for c in event_categories}
        unknown, unspecified = UNKNOWN_EVENT_CATEGORY, EVENT_CATEGORY_UNSPECIFIED

    category_ids = [
        category_id
        for event_id, category_id in organizer_pairs(event.organizer_type, meeting_links, category_links)
        if event_id == event.id
    ]
    if not category_ids:
        return unspecified
    return ", ".join(names.get(category_id, unknown) for category_id in category_ids)


def filter_events(events: Iterable[Event], period: Optional[FiscalPeriod], search: str = "") -> list[Event]:
    """Events inside ``period`` whose subject contains ``search`` (case-insensitive)."""
    term = search.lower()
    result = []
    for event in events:
        if period is not None and not period.contains(event.date):
            continue
        if term and term not in (event.subject or "").lower():
            continue
        result.append(event)
    return result


def sidebar_counts(
    events: Iterable[Event],
    organizer_type: OrganizerType,
    pairs: Iterable[tuple[str, str]],
    categories: Iterable[Category],
) -> list[SidebarCount]:
    """Organizer-link tallies per category over ``events`` of ``organizer_type``.

    Categories with no occurrences are dropped; the rest are sorted by name.
    """
    event_ids = {e.id for e in events if e.organizer_type == organizer_type}
    counts = Counter(category_id for event_id, category_id in pairs if event_id in event_ids)
    rows = [
        SidebarCount(id=c.id, name=c.name, count=counts[c.id])
        for c in categories
        if counts.get(c.id, 0) > 0
    ]
    return sorted(rows, key=lambda row: name_key(row.name))


def events_for_organizer(
    events: Iterable[Event],
    organizer_type: Optional[OrganizerType],
    organizer_id: Optional[str],
    pairs: Iterable[tuple[str, str]],
) -> list[Event]:
    """Events linked to one organizer; nothing is listed until an organizer is selected."""
    if organizer_type is None or not organizer_id:
        return []
    linked = {event_id for event_id, category_id in pairs if category_id == organizer_id}
    return [e for e in events if e.id in linked]


def selector_participants(
    participants: Iterable[Participant],
    memberships: Iterable[ParticipantMeetingCategoryLink],
    meeting_categories: Iterable[Category],
    mode: SelectionMode,
    in_person_ids: Sequence[str] = (),
    online_ids: Sequence[str] = (),
) -> list[SelectorParticipant]:
    """Participants grouped by meeting category for the selection dialog.

    A participant with several memberships appears once per group. Ids already
    chosen for the other attendance mode are disabled.
    """
    if mode == SelectionMode.attendees_in_person:
        disabled_ids = set(online_ids)
    elif mode == SelectionMode.attendees_online:
        disabled_ids = set(in_person_ids)
    else:
        disabled_ids = set()

    category_names = {c.id: c.name for c in meeting_categories}
    groups: dict[str, list[str]] = {}
    for link in memberships:
        groups.setdefault(link.participant_id, []).append(
            category_names.get(link.meeting_category_id, UNKNOWN_MEETING_CATEGORY)
        )

    result = []
    for p in participants:
        is_disabled = p.id in disabled_ids
        for group in groups.get(p.id) or [NO_MEETING_CATEGORY_GROUP]:
            result.append(SelectorParticipant(id=p.id, name=p.name, group=group, is_disabled=is_disabled))
    return result


def filter_categories(categories: Iterable[Category], search: str = "") -> list[Category]:
    term = search.lower()
    return sorted(
        (c for c in categories if term in (c.name or "").lower()),
        key=lambda c: name_key(c.name),
    )


def meeting_category_usage(
    meetings: Iterable[Meeting],
    memberships: Iterable[ParticipantMeetingCategoryLink],
    organizer_links: Iterable[OrganizingMeetingCategoryLink],
) -> dict[str, tuple[int, int, int]]:
    """``{category_id: (meetings, participants, events)}`` for categories used at least once."""
    meeting_counts = Counter(m.meeting_category_id for m in meetings)
    participant_counts = Counter(link.meeting_category_id for link in memberships)
    event_counts = Counter(link.meeting_category_id for link in organizer_links)
    category_ids = set(meeting_counts) | set(participant_counts) | set(event_counts)
    return {
        category_id: (meeting_counts[category_id], participant_counts[category_id], event_counts[category_id])
        for category_id in category_ids
    }


def normalize_search(text: Optional[str]) -> str:
    """Lowercase ``text`` and drop accents and punctuation so "C.A. Café" matches "ca cafe"."""
    decomposed = unicodedata.normalize("NFD", text or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _SEARCH_PUNCTUATION.sub("", stripped.lower())


def company_suggestions(
    companies: Iterable[Company], term: str, limit: int = COMPANY_SUGGESTION_LIMIT
) -> list[Company]:
    """Directory entries whose name contains ``term``; nothing until three characters are typed."""
    if len(term) < COMPANY_SEARCH_MIN_LENGTH:
        return []
    needle = normalize_search(term)
    return [c for c in companies if needle in normalize_search(c.name)][:limit]


def company_event_subject(
    organizer_type: OrganizerType,
    organizer_ids: Sequence[str],
    meeting_categories: Iterable[Category],
    event_categories: Iterable[Category],
    company_name: str,
) -> Optional[str]:
    """``"<first organizer> - <company>"``, or None when either part is unknown or blank."""
    company_name = company_name.strip()
    if not organizer_ids or not company_name:
        return None
    categories = meeting_categories if organizer_type == OrganizerType.meeting_category else event_categories
    organizer_name = next((c.name for c in categories if c.id == organizer_ids[0]), None)
    if not organizer_name:
        return None
    return f"{organizer_name} - {company_name}"
