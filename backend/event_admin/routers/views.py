"""Read models for the event and committee management screens."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from event_admin.cache import QueryCache, get_cache
from event_admin.controllers.manage_committees import ManageCommitteesController
from event_admin.controllers.manage_events import ManageEventsController
from event_admin.dependencies import get_store
from event_admin.models.event import OrganizerType
from event_admin.permissions import Capabilities, get_capabilities
from event_admin.schemas.views import CommitteesView, EventsView
from event_admin.store.base import Store

router = APIRouter()


@router.get("/events", response_model=EventsView)
def events_view(
    start_year: Optional[int] = Query(None, description="Fiscal period; defaults to the current one"),
    search: str = Query(""),
    organizer_type: Optional[OrganizerType] = Query(None),
    organizer_id: Optional[str] = Query(None),
    store: Store = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    capabilities: Capabilities = Depends(get_capabilities),
):
    """Sidebar counts per organizer and the events of the selected organizer."""
    controller = ManageEventsController(store, cache, capabilities=capabilities)
    if start_year is not None:
        controller.set_period(start_year)
    controller.set_search(search)
    controller.select_organizer_filter(organizer_type, organizer_id)
    return controller.view()


@router.get("/committees", response_model=CommitteesView)
def committees_view(
    search: str = Query(""),
    store: Store = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    capabilities: Capabilities = Depends(get_capabilities),
):
    controller = ManageCommitteesController(store, cache, capabilities=capabilities)
    controller.set_search(search)
    return controller.view()
