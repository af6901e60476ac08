"""Event orchestration: an event together with its organizer, invitee and attendee links.

Responsibilities:
- Fan one creation request out into one event row per schedule entry
- Route organizer links to the table chosen by the organizer type
- Resynchronise link tables on update through a set difference
- Delete link rows before the event row
- Invalidate every cached collection the write touched

Store calls run strictly one after another. There is no rollback: when a
later call fails, earlier writes stay persisted and the error propagates.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from fastapi import HTTPException, status

from event_admin import mappers
from event_admin.cache import EVENT_GRAPH_KEYS, QueryCache, invalidates
from event_admin.functions import FunctionInvocationError, FunctionsClient
from event_admin.models.attendee import AttendanceType
from event_admin.models.event import OrganizerType
from event_admin.schemas.event import Event, EventDraft
from event_admin.schemas.schedule import ScheduleEntry
from event_admin.services.links import diff_links, unique
from event_admin.store import tables
from event_admin.store.base import Store, eq, in_

logger = logging.getLogger(__name__)

NOTIFY_FUNCTION = "notify-event-attendees"

# Organizer type -> (link table, category column)
ORGANIZER_TABLES: dict[OrganizerType, tuple[str, str]] = {
    OrganizerType.meeting_category: (tables.ORGANIZING_MEETING_CATEGORIES, "commission_id"),
    OrganizerType.category: (tables.ORGANIZING_CATEGORIES, "category_id"),
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def expand_drafts(event_data: EventDraft, schedules: Sequence[ScheduleEntry]) -> list[EventDraft]:
    """One draft per schedule entry, or the event data itself when there is no schedule."""
    if not schedules:
        return [event_data]
    return [
        event_data.model_copy(update={"date": s.date, "start_time": s.start_time, "end_time": s.end_time})
        for s in schedules
    ]


def build_link_rows(
    event_ids: Sequence[str],
    organizer_type: OrganizerType,
    organizer_ids: Sequence[str],
    invitee_ids: Sequence[str],
    attendee_in_person_ids: Sequence[str],
    attendee_online_ids: Sequence[str],
) -> dict[str, list[dict[str, Any]]]:
    """Link rows for every new event, keyed by table in insertion order."""
    organizer_table, organizer_column = ORGANIZER_TABLES[organizer_type]
    payloads: dict[str, list[dict[str, Any]]] = {
        tables.ORGANIZING_MEETING_CATEGORIES: [],
        tables.ORGANIZING_CATEGORIES: [],
        tables.INVITEES: [],
        tables.ATTENDEES: [],
    }
    for event_id in event_ids:
        for oid in unique(organizer_ids):
            payloads[organizer_table].append({"event_id": event_id, organizer_column: oid})
        for pid in unique(invitee_ids):
            payloads[tables.INVITEES].append({"event_id": event_id, "participant_id": pid})
        for pid in unique(attendee_in_person_ids):
            payloads[tables.ATTENDEES].append(
                {"event_id": event_id, "participant_id": pid, "attendance_type": AttendanceType.in_person.value}
            )
        for pid in unique(attendee_online_ids):
            payloads[tables.ATTENDEES].append(
                {"event_id": event_id, "participant_id": pid, "attendance_type": AttendanceType.online.value}
            )
    return payloads


@invalidates(*EVENT_GRAPH_KEYS)
def create_complex_event(
    store: Store,
    cache: Optional[QueryCache],
    event_data: EventDraft,
    schedules: Sequence[ScheduleEntry],
    organizer_ids: Sequence[str],
    invitee_ids: Sequence[str],
    attendee_in_person_ids: Sequence[str],
    attendee_online_ids: Sequence[str],
    actor_id: Optional[str] = None,
) -> list[Event]:
    """Create one event per schedule entry and link each to every organizer, invitee and attendee."""
    drafts = expand_drafts(event_data, schedules)
    rows = []
    for draft in drafts:
        row = mappers.event_to_row(draft)
        row["created_by"] = actor_id
        rows.append(row)

    inserted = store.insert(tables.EVENTS, rows)
    event_ids = [row["id"] for row in inserted]

    payloads = build_link_rows(
        event_ids,
        event_data.organizer_type,
        organizer_ids,
        invitee_ids,
        attendee_in_person_ids,
        attendee_online_ids,
    )
    for table, link_rows in payloads.items():
        if link_rows:
            store.insert(table, link_rows)

    logger.info(
        "Created %d event(s) '%s' with %d link row(s)",
        len(event_ids), event_data.subject, sum(len(r) for r in payloads.values()),
    )
    return [mappers.event_from_row(row) for row in inserted]


def _resync_links(store: Store, table: str, event_id: str, column: str, desired: Sequence[str]) -> None:
    current = [row[column] for row in store.select(table, [eq("event_id", event_id)])]
    to_add, to_remove = diff_links(current, desired)
    if to_remove:
        store.delete(table, [eq("event_id", event_id), in_(column, to_remove)])
    if to_add:
        store.insert(table, [{"event_id": event_id, column: value} for value in to_add])


def _resync_attendees(
    store: Store,
    event_id: str,
    in_person_ids: Sequence[str],
    online_ids: Sequence[str],
) -> None:
    current = [
        (row["participant_id"], AttendanceType(row["attendance_type"]))
        for row in store.select(tables.ATTENDEES, [eq("event_id", event_id)])
    ]
    desired = [(pid, AttendanceType.in_person) for pid in in_person_ids] + [
        (pid, AttendanceType.online) for pid in online_ids
    ]
    to_add, to_remove = diff_links(current, desired)

    for attendance_type in AttendanceType:
        removed = [pid for pid, kind in to_remove if kind == attendance_type]
        if removed:
            store.delete(
                tables.ATTENDEES,
                [eq("event_id", event_id), eq("attendance_type", attendance_type.value), in_("participant_id", removed)],
            )
    if to_add:
        store.insert(
            tables.ATTENDEES,
            [{"event_id": event_id, "participant_id": pid, "attendance_type": kind.value} for pid, kind in to_add],
        )


@invalidates(*EVENT_GRAPH_KEYS)
def update_complex_event(
    store: Store,
    cache: Optional[QueryCache],
    event_id: str,
    event_data: EventDraft,
    organizer_ids: Sequence[str],
    invitee_ids: Sequence[str],
    attendee_in_person_ids: Sequence[str],
    attendee_online_ids: Sequence[str],
    actor_id: Optional[str] = None,
) -> Event:
    """Update an event's fields and make its link sets equal the given lists."""
    patch = mappers.event_to_row_for_update(event_data)
    patch["updated_at"] = _now()
    patch["updated_by"] = actor_id
    updated = store.update(tables.EVENTS, patch, [eq("id", event_id)])
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")

    organizer_table, organizer_column = ORGANIZER_TABLES[event_data.organizer_type]
    for other_table, _ in ORGANIZER_TABLES.values():
        if other_table != organizer_table:
            store.delete(other_table, [eq("event_id", event_id)])
    _resync_links(store, organizer_table, event_id, organizer_column, organizer_ids)
    _resync_links(store, tables.INVITEES, event_id, "participant_id", invitee_ids)
    _resync_attendees(store, event_id, attendee_in_person_ids, attendee_online_ids)

    logger.info("Updated event %s (%s organizers)", event_id, event_data.organizer_type.value)
    return mappers.event_from_row(updated[0])


@invalidates(*EVENT_GRAPH_KEYS)
def delete_complex_event(store: Store, cache: Optional[QueryCache], event_id: str) -> int:
    """Delete an event's link rows, then the event row. Returns the number of event rows removed."""
    store.delete(tables.ORGANIZING_MEETING_CATEGORIES, [eq("event_id", event_id)])
    store.delete(tables.ORGANIZING_CATEGORIES, [eq("event_id", event_id)])
    store.delete(tables.INVITEES, [eq("event_id", event_id)])
    store.delete(tables.ATTENDEES, [eq("event_id", event_id)])
    deleted = store.delete(tables.EVENTS, [eq("id", event_id)])
    logger.info("Deleted event %s", event_id)
    return deleted


def send_invitations(store: Store, functions: FunctionsClient, event_id: str) -> int:
    """Queue invitation e-mails for an event's invitees. Returns how many invitees were notified."""
    invitees = store.select(tables.INVITEES, [eq("event_id", event_id)])
    if not invitees:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No invitees registered for this event")

    try:
        functions.invoke(NOTIFY_FUNCTION, {"eventId": event_id})
    except FunctionInvocationError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not send invitations: {e}",
        )

    logger.info("Queued %d invitation(s) for event %s", len(invitees), event_id)
    return len(invitees)
