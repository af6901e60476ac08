"""Event category API routes."""
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from event_admin.cache import QueryCache, get_cache
from event_admin.dependencies import get_actor_id, get_queries, get_store
from event_admin.schemas.category import Category, CategoryCreate, CategoryUpdate
from event_admin.services import category_service, event_views
from event_admin.services.queries import Queries
from event_admin.store.base import Store

router = APIRouter()


@router.get("/", response_model=list[Category])
def list_event_categories(search: str = "", queries: Queries = Depends(get_queries)):
    return event_views.filter_categories(queries.event_categories(), search)


@router.post("/", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_event_category(
    payload: CategoryCreate,
    store: Store = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    return category_service.create_event_category(store, cache, payload, actor_id=actor_id)


@router.put("/{category_id}", response_model=Category)
def update_event_category(
    category_id: str,
    payload: CategoryUpdate,
    store: Store = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    return category_service.update_event_category(store, cache, category_id, payload, actor_id=actor_id)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event_category(
    category_id: str,
    store: Store = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
):
    """Delete an event category; events it organized lose the link."""
    category_service.delete_event_category(store, cache, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
