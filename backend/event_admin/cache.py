"""Keyed query cache with per-key freshness windows.

Accessors read through ``get_or_fetch``; mutation orchestrators call
``invalidate`` for the keys their writes affect. A fetch that raises leaves
the cache untouched, and a fetch that overlaps an invalidation of its key is
returned to its caller but never stored.
"""
import enum
import logging
import threading
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)


class CacheKey(str, enum.Enum):
    events = "events"
    meeting_categories = "meetingCategories"
    event_categories = "eventCategories"
    organizing_meeting_categories = "eventOrganizingMeetingCategories"
    organizing_categories = "eventOrganizingCategories"
    invitees = "eventInvitees"
    attendees = "eventAttendees"
    participant_meeting_categories = "participantMeetingCategories"
    meetings = "meetings"
    participants = "participants"
    companies = "companies"


MINUTE = 60.0

# Frequently-changing collections get 5 minutes, reference data 30
FRESHNESS_WINDOWS: dict[CacheKey, float] = {
    CacheKey.events: 5 * MINUTE,
    CacheKey.meeting_categories: 30 * MINUTE,
    CacheKey.event_categories: 30 * MINUTE,
    CacheKey.organizing_meeting_categories: 5 * MINUTE,
    CacheKey.organizing_categories: 5 * MINUTE,
    CacheKey.invitees: 5 * MINUTE,
    CacheKey.attendees: 5 * MINUTE,
    CacheKey.participant_meeting_categories: 10 * MINUTE,
    CacheKey.meetings: 5 * MINUTE,
    CacheKey.participants: 10 * MINUTE,
    CacheKey.companies: 30 * MINUTE,
}

EVENT_GRAPH_KEYS = (
    CacheKey.events,
    CacheKey.organizing_meeting_categories,
    CacheKey.organizing_categories,
    CacheKey.invitees,
    CacheKey.attendees,
)


@dataclass
class CacheEntry:
    data: Any
    fetched_at: float


class QueryCache:
    """Registry of cached collections keyed by entity name."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._generations: dict[CacheKey, int] = {}
        self._lock = threading.Lock()

    def is_fresh(self, key: CacheKey) -> bool:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return False
        return self._clock() - entry.fetched_at < FRESHNESS_WINDOWS[key]

    def get_or_fetch(self, key: CacheKey, fetch: Callable[[], Any]) -> Any:
        """Return the cached collection for ``key``, calling ``fetch`` when stale or missing."""
        with self._lock:
            entry = self._entries.get(key)
            generation = self._generations.get(key, 0)
        if entry is not None and self._clock() - entry.fetched_at < FRESHNESS_WINDOWS[key]:
            logger.debug("Cache hit for %s", key.value)
            return entry.data

        logger.debug("Cache miss for %s", key.value)
        data = fetch()
        with self._lock:
            if self._generations.get(key, 0) == generation:
                self._entries[key] = CacheEntry(data=data, fetched_at=self._clock())
            else:
                logger.debug("Discarding fetch of %s that overlapped an invalidation", key.value)
        return data

    def invalidate(self, key: CacheKey) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1
        logger.debug("Invalidated %s", key.value)

    def invalidate_many(self, keys: Iterable[CacheKey]) -> None:
        for key in keys:
            self.invalidate(key)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            for key in CacheKey:
                self._generations[key] = self._generations.get(key, 0) + 1


def invalidates(*keys: CacheKey):
    """Decorate an orchestrator ``fn(store, cache, ...)`` to invalidate ``keys`` when it finishes.

    Invalidation also runs when the orchestrator raises, since earlier store
    calls in the same unit of work may already have been persisted.
    """

    def decorator(fn):
        @wraps(fn)
        def wrapper(store, cache: Optional[QueryCache], *args, **kwargs):
            try:
                return fn(store, cache, *args, **kwargs)
            finally:
                if cache is not None:
                    cache.invalidate_many(keys)

        return wrapper

    return decorator


query_cache = QueryCache()


def get_cache() -> QueryCache:
    return query_cache
