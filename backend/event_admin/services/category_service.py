"""Meeting category and event category orchestration.

A meeting category referenced by a meeting cannot be deleted. Participant
memberships and organizer links are soft references: deleting the category
drops them first.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, status

from event_admin import mappers
from event_admin.cache import CacheKey, QueryCache, invalidates
from event_admin.schemas.category import Category, CategoryCreate, CategoryUpdate, DeletionInfo
from event_admin.store import tables
from event_admin.store.base import Store, eq, in_

logger = logging.getLogger(__name__)

MEETING_CATEGORY_KEYS = (
    CacheKey.meeting_categories,
    CacheKey.participant_meeting_categories,
    CacheKey.organizing_meeting_categories,
)
EVENT_CATEGORY_KEYS = (
    CacheKey.event_categories,
    CacheKey.organizing_categories,
)


def _category_row(data: CategoryCreate, actor_id: Optional[str]) -> dict:
    row = {"name": data.name, "created_by": actor_id}
    if data.id:
        row["id"] = data.id
    return row


def _update_category(
    store: Store, table: str, category_id: str, data: CategoryUpdate, actor_id: Optional[str], label: str
) -> Category:
    patch = {"name": data.name, "updated_by": actor_id, "updated_at": datetime.now(timezone.utc)}
    rows = store.update(table, patch, [eq("id", category_id)])
    if not rows:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    logger.info("Updated %s %s", label.lower(), category_id)
    return mappers.category_from_row(rows[0])


def _get_category(store: Store, table: str, category_id: str, label: str) -> Category:
    rows = store.select(table, [eq("id", category_id)])
    if not rows:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return mappers.category_from_row(rows[0])


@invalidates(*MEETING_CATEGORY_KEYS)
def create_meeting_category(
    store: Store, cache: Optional[QueryCache], data: CategoryCreate, actor_id: Optional[str] = None
) -> Category:
    row = store.insert(tables.MEETING_CATEGORIES, [_category_row(data, actor_id)])[0]
    logger.info("Created meeting category '%s'", data.name)
    return mappers.category_from_row(row)


@invalidates(*MEETING_CATEGORY_KEYS)
def update_meeting_category(
    store: Store,
    cache: Optional[QueryCache],
    category_id: str,
    data: CategoryUpdate,
    actor_id: Optional[str] = None,
) -> Category:
    return _update_category(store, tables.MEETING_CATEGORIES, category_id, data, actor_id, "Meeting category")


def meeting_category_dependencies(store: Store, category_id: str) -> DeletionInfo:
    """Everything that references a meeting category, by display name."""
    category = _get_category(store, tables.MEETING_CATEGORIES, category_id, "Meeting category")

    meetings = store.select(tables.MEETINGS, [eq("commission_id", category_id)])

    memberships = store.select(tables.PARTICIPANT_MEETING_CATEGORIES, [eq("commission_id", category_id)])
    participant_ids = [m["participant_id"] for m in memberships]
    participants = store.select(tables.PARTICIPANTS, [in_("id", participant_ids)]) if participant_ids else []

    organizer_links = store.select(tables.ORGANIZING_MEETING_CATEGORIES, [eq("commission_id", category_id)])
    event_ids = [link["event_id"] for link in organizer_links]
    events = store.select(tables.EVENTS, [in_("id", event_ids)]) if event_ids else []

    return DeletionInfo(
        category=category,
        meetings=[m["subject"] for m in meetings],
        participants=[p["name"] for p in participants],
        events=[e["subject"] for e in events],
    )


@invalidates(*MEETING_CATEGORY_KEYS)
def delete_meeting_category(store: Store, cache: Optional[QueryCache], category_id: str) -> None:
    """Delete a meeting category together with its memberships and organizer links.

    Raises 409 without writing anything when a meeting still references it.
    """
    if store.select(tables.MEETINGS, [eq("commission_id", category_id)]):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Meeting category has meetings and cannot be deleted",
        )

    store.delete(tables.PARTICIPANT_MEETING_CATEGORIES, [eq("commission_id", category_id)])
    store.delete(tables.ORGANIZING_MEETING_CATEGORIES, [eq("commission_id", category_id)])
    deleted = store.delete(tables.MEETING_CATEGORIES, [eq("id", category_id)])
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meeting category not found")
    logger.info("Deleted meeting category %s", category_id)


@invalidates(*EVENT_CATEGORY_KEYS)
def create_event_category(
    store: Store, cache: Optional[QueryCache], data: CategoryCreate, actor_id: Optional[str] = None
) -> Category:
    row = store.insert(tables.EVENT_CATEGORIES, [_category_row(data, actor_id)])[0]
    logger.info("Created event category '%s'", data.name)
    return mappers.category_from_row(row)


@invalidates(*EVENT_CATEGORY_KEYS)
def update_event_category(
    store: Store,
    cache: Optional[QueryCache],
    category_id: str,
    data: CategoryUpdate,
    actor_id: Optional[str] = None,
) -> Category:
    return _update_category(store, tables.EVENT_CATEGORIES, category_id, data, actor_id, "Event category")


@invalidates(*EVENT_CATEGORY_KEYS)
def delete_event_category(store: Store, cache: Optional[QueryCache], category_id: str) -> None:
    store.delete(tables.ORGANIZING_CATEGORIES, [eq("category_id", category_id)])
    deleted = store.delete(tables.EVENT_CATEGORIES, [eq("id", category_id)])
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event category not found")
    logger.info("Deleted event category %s", category_id)
