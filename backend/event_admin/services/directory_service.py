"""Participants and meetings: the records events and categories point at."""
import logging
from typing import Optional

from fastapi import HTTPException, status

from event_admin import mappers
from event_admin.cache import CacheKey, QueryCache, invalidates
from event_admin.schemas.directory import Meeting, MeetingCreate, Participant, ParticipantCreate
from event_admin.services.links import unique
from event_admin.store import tables
from event_admin.store.base import Store, eq

logger = logging.getLogger(__name__)


@invalidates(CacheKey.participants, CacheKey.participant_meeting_categories)
def create_participant(
    store: Store, cache: Optional[QueryCache], data: ParticipantCreate, actor_id: Optional[str] = None
) -> Participant:
    """Create a participant and its meeting category memberships."""
    row = data.model_dump(exclude={"meeting_category_ids"})
    row["created_by"] = actor_id
    participant = store.insert(tables.PARTICIPANTS, [row])[0]

    memberships = [
        {"participant_id": participant["id"], "commission_id": category_id}
        for category_id in unique(data.meeting_category_ids)
    ]
    if memberships:
        store.insert(tables.PARTICIPANT_MEETING_CATEGORIES, memberships)

    logger.info("Created participant '%s' in %d meeting categories", data.name, len(memberships))
    return mappers.participant_from_row(participant)


@invalidates(CacheKey.meetings)
def create_meeting(
    store: Store, cache: Optional[QueryCache], data: MeetingCreate, actor_id: Optional[str] = None
) -> Meeting:
    if not store.select(tables.MEETING_CATEGORIES, [eq("id", data.meeting_category_id)]):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meeting category not found")

    row = mappers.meeting_to_row(data)
    row["created_by"] = actor_id
    meeting = store.insert(tables.MEETINGS, [row])[0]
    logger.info("Created meeting '%s'", data.subject)
    return mappers.meeting_from_row(meeting)


@invalidates(CacheKey.meetings)
def delete_meeting(store: Store, cache: Optional[QueryCache], meeting_id: str) -> None:
    if not store.delete(tables.MEETINGS, [eq("id", meeting_id)]):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meeting not found")
    logger.info("Deleted meeting %s", meeting_id)
