"""Meeting API routes."""
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from event_admin.cache import QueryCache, get_cache
from event_admin.dependencies import get_actor_id, get_queries, get_store
from event_admin.schemas.directory import Meeting, MeetingCreate
from event_admin.services import directory_service
from event_admin.services.queries import Queries
from event_admin.store.base import Store

router = APIRouter()


@router.get("/", response_model=list[Meeting])
def list_meetings(meeting_category_id: Optional[str] = None, queries: Queries = Depends(get_queries)):
    meetings = queries.meetings()
    if meeting_category_id:
        meetings = [m for m in meetings if m.meeting_category_id == meeting_category_id]
    return sorted(meetings, key=lambda m: m.date)


@router.post("/", response_model=Meeting, status_code=status.HTTP_201_CREATED)
def create_meeting(
    payload: MeetingCreate,
    store: Store = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    return directory_service.create_meeting(store, cache, payload, actor_id=actor_id)


@router.delete("/{meeting_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meeting(meeting_id: str, store: Store = Depends(get_store), cache: QueryCache = Depends(get_cache)):
    directory_service.delete_meeting(store, cache, meeting_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
