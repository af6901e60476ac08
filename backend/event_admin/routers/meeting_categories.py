"""Meeting category (commission) API routes."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from event_admin.cache import QueryCache, get_cache
from event_admin.dependencies import get_actor_id, get_queries, get_store
from event_admin.schemas.category import Category, CategoryCreate, CategoryUpdate, DeletionInfo
from event_admin.services import category_service, event_views
from event_admin.services.queries import Queries
from event_admin.store.base import Store

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[Category])
def list_meeting_categories(search: str = "", queries: Queries = Depends(get_queries)):
    return event_views.filter_categories(queries.meeting_categories(), search)


@router.post("/", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_meeting_category(
    payload: CategoryCreate,
    store: Store = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    return category_service.create_meeting_category(store, cache, payload, actor_id=actor_id)


@router.put("/{category_id}", response_model=Category)
def update_meeting_category(
    category_id: str,
    payload: CategoryUpdate,
    store: Store = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    return category_service.update_meeting_category(store, cache, category_id, payload, actor_id=actor_id)


@router.get("/{category_id}/dependencies", response_model=DeletionInfo)
def meeting_category_dependencies(category_id: str, store: Store = Depends(get_store)):
    """Meetings, participants and events referencing the category. Meetings block deletion."""
    return category_service.meeting_category_dependencies(store, category_id)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meeting_category(
    category_id: str,
    store: Store = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
):
    category_service.delete_meeting_category(store, cache, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
