"""Tests for the keyed query cache and its freshness windows."""
import pytest

from event_admin.cache import EVENT_GRAPH_KEYS, FRESHNESS_WINDOWS, CacheKey, invalidates


class Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return [self.calls]


class TestFreshness:
    def test_windows(self):
        assert FRESHNESS_WINDOWS[CacheKey.events] == 300
        assert FRESHNESS_WINDOWS[CacheKey.meeting_categories] == 1800
        assert FRESHNESS_WINDOWS[CacheKey.event_categories] == 1800
        assert FRESHNESS_WINDOWS[CacheKey.participants] == 600
        assert FRESHNESS_WINDOWS[CacheKey.participant_meeting_categories] == 600
        assert set(FRESHNESS_WINDOWS) == set(CacheKey)

    def test_fresh_entry_is_served_from_cache(self, cache, clock):
        fetch = Counter()
        assert cache.get_or_fetch(CacheKey.events, fetch) == [1]
        clock.advance(299)
        assert cache.get_or_fetch(CacheKey.events, fetch) == [1]
        assert fetch.calls == 1

    def test_stale_entry_is_refetched(self, cache, clock):
        fetch = Counter()
        cache.get_or_fetch(CacheKey.events, fetch)
        clock.advance(300)
        assert not cache.is_fresh(CacheKey.events)
        assert cache.get_or_fetch(CacheKey.events, fetch) == [2]

    def test_reference_data_lives_longer(self, cache, clock):
        fetch = Counter()
        cache.get_or_fetch(CacheKey.meeting_categories, fetch)
        clock.advance(1000)
        assert cache.is_fresh(CacheKey.meeting_categories)
        assert cache.get_or_fetch(CacheKey.meeting_categories, fetch) == [1]

    def test_failed_fetch_caches_nothing(self, cache):
        def boom():
            raise RuntimeError("down")

        with pytest.raises(RuntimeError):
            cache.get_or_fetch(CacheKey.events, boom)
        assert not cache.is_fresh(CacheKey.events)


class TestInvalidation:
    def test_invalidate_forces_refetch(self, cache):
        fetch = Counter()
        cache.get_or_fetch(CacheKey.events, fetch)
        cache.invalidate(CacheKey.events)
        assert cache.get_or_fetch(CacheKey.events, fetch) == [2]

    def test_invalidate_leaves_other_keys(self, cache):
        cache.get_or_fetch(CacheKey.events, Counter())
        cache.get_or_fetch(CacheKey.participants, Counter())
        cache.invalidate(CacheKey.events)
        assert cache.is_fresh(CacheKey.participants)

    def test_decorator_invalidates_after_success(self, cache):
        cache.get_or_fetch(CacheKey.events, Counter())

        @invalidates(*EVENT_GRAPH_KEYS)
        def write(store, cache):
            return "done"

        assert write(None, cache) == "done"
        assert not cache.is_fresh(CacheKey.events)

    def test_decorator_invalidates_when_write_fails(self, cache):
        cache.get_or_fetch(CacheKey.invitees, Counter())

        @invalidates(CacheKey.invitees)
        def write(store, cache):
            raise RuntimeError("half written")

        with pytest.raises(RuntimeError):
            write(None, cache)
        assert not cache.is_fresh(CacheKey.invitees)

    def test_decorator_tolerates_missing_cache(self):
        @invalidates(CacheKey.events)
        def write(store, cache):
            return 1

        assert write(None, None) == 1


class TestOverlappingFetch:
    def test_fetch_overlapping_invalidation_is_not_stored(self, cache):
        rows = ["old"]

        def fetch_then_write():
            snapshot = list(rows)
            rows.append("new")
            cache.invalidate(CacheKey.events)
            return snapshot

        assert cache.get_or_fetch(CacheKey.events, fetch_then_write) == ["old"]
        assert not cache.is_fresh(CacheKey.events)
        assert cache.get_or_fetch(CacheKey.events, lambda: list(rows)) == ["old", "new"]

    def test_fetch_overlapping_clear_is_not_stored(self, cache):
        def fetch_then_clear():
            cache.clear()
            return ["stale"]

        cache.get_or_fetch(CacheKey.participants, fetch_then_clear)
        assert not cache.is_fresh(CacheKey.participants)

    def test_invalidating_another_key_does_not_discard(self, cache):
        def fetch():
            cache.invalidate(CacheKey.participants)
            return [1]

        cache.get_or_fetch(CacheKey.events, fetch)
        assert cache.is_fresh(CacheKey.events)
