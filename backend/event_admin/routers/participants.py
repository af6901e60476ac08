"""Participant API routes."""
from typing import Optional

from fastapi import APIRouter, Depends, status

from event_admin.cache import QueryCache, get_cache
from event_admin.dependencies import get_actor_id, get_queries, get_store
from event_admin.schemas.directory import Participant, ParticipantCreate
from event_admin.services import directory_service
from event_admin.services.event_views import name_key
from event_admin.services.queries import Queries
from event_admin.store.base import Store

router = APIRouter()


@router.get("/", response_model=list[Participant])
def list_participants(queries: Queries = Depends(get_queries)):
    return sorted(queries.participants(), key=lambda p: name_key(p.name))


@router.post("/", response_model=Participant, status_code=status.HTTP_201_CREATED)
def create_participant(
    payload: ParticipantCreate,
    store: Store = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    """Create a participant with its meeting category memberships."""
    return directory_service.create_participant(store, cache, payload, actor_id=actor_id)
