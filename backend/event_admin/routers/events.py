"""Event API routes. Multi-table writes are delegated to event_service."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel

from event_admin.cache import QueryCache, get_cache
from event_admin.dependencies import get_actor_id, get_functions, get_queries, get_store
from event_admin.functions import FunctionsClient
from event_admin.models.event import OrganizerType
from event_admin.period import FiscalPeriod
from event_admin.schemas.event import ComplexEventCreate, ComplexEventUpdate, Event, EventDetail
from event_admin.schemas.schedule import ScheduleEntry, ScheduleExpandRequest
from event_admin.services import event_service, event_views
from event_admin.services.queries import Queries
from event_admin.services.scheduling import ScheduleValidationError, expand_schedule, merge_schedules
from event_admin.store.base import Store

logger = logging.getLogger(__name__)
router = APIRouter()


class InvitationResult(BaseModel):
    event_id: str
    sent: int


class SuggestedInvitees(BaseModel):
    participant_ids: list[str]


@router.post("/", response_model=list[Event], status_code=status.HTTP_201_CREATED)
def create_event(
    payload: ComplexEventCreate,
    store: Store = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    """Create one event per schedule entry, each linked to the same organizers and participants."""
    return event_service.create_complex_event(
        store,
        cache,
        payload.event,
        payload.schedules,
        payload.organizer_ids,
        payload.invitee_ids,
        payload.attendee_in_person_ids,
        payload.attendee_online_ids,
        actor_id=actor_id,
    )


@router.get("/", response_model=list[Event])
def list_events(
    start_year: Optional[int] = Query(None, description="Fiscal period starting 1 November of this year"),
    search: str = Query(""),
    include_cancelled: bool = Query(True),
    queries: Queries = Depends(get_queries),
):
    period = FiscalPeriod(start_year) if start_year is not None else None
    events = event_views.filter_events(queries.events(), period, search)
    if not include_cancelled:
        events = [e for e in events if not e.is_cancelled]
    return sorted(events, key=lambda e: (e.date, e.start_time))


@router.post("/schedules/expand", response_model=list[ScheduleEntry])
def expand_schedules(payload: ScheduleExpandRequest):
    """Expand a date or date range and merge it into the existing schedule list."""
    try:
        entries = expand_schedule(payload.input)
    except ScheduleValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return merge_schedules(payload.existing, entries)


@router.get("/suggested-invitees", response_model=SuggestedInvitees)
def suggested_invitees(
    organizer_type: OrganizerType = Query(OrganizerType.meeting_category),
    organizer_ids: list[str] = Query([]),
    queries: Queries = Depends(get_queries),
):
    """Participants who attended earlier events of the given organizers."""
    return SuggestedInvitees(participant_ids=queries.suggest_invitee_ids(organizer_type, organizer_ids))


@router.get("/{event_id}", response_model=EventDetail)
def get_event(event_id: str, queries: Queries = Depends(get_queries)):
    """Fetch a single event with its link selections and organizer name."""
    event = queries.get_event(event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    links = queries.event_links(event)
    organizer_name = event_views.organizer_display_name(
        event,
        queries.organizing_meeting_categories(),
        queries.organizing_categories(),
        queries.meeting_categories(),
        queries.event_categories(),
    )
    return EventDetail(event=event, organizer_name=organizer_name, **links.model_dump())


@router.put("/{event_id}", response_model=Event)
def update_event(
    event_id: str,
    payload: ComplexEventUpdate,
    store: Store = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    """Update an event and make its link sets equal the submitted lists."""
    return event_service.update_complex_event(
        store,
        cache,
        event_id,
        payload.event,
        payload.organizer_ids,
        payload.invitee_ids,
        payload.attendee_in_person_ids,
        payload.attendee_online_ids,
        actor_id=actor_id,
    )


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, store: Store = Depends(get_store), cache: QueryCache = Depends(get_cache)):
    if not event_service.delete_complex_event(store, cache, event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{event_id}/invitations", response_model=InvitationResult)
def send_invitations(
    event_id: str,
    store: Store = Depends(get_store),
    functions: FunctionsClient = Depends(get_functions),
):
    """Ask the notification function to e-mail every invitee of the event."""
    sent = event_service.send_invitations(store, functions, event_id)
    return InvitationResult(event_id=event_id, sent=sent)
