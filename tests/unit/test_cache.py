"""Unit tests for yemekcli.cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

from yemekcli.cache import DEFAULT_TTL_SECONDS, TTLCache

if TYPE_CHECKING:
    from conftest import FakeClock


class TestTTLCache:
    def test_set_then_get_returns_value(self, clock: FakeClock) -> None:
        cache = TTLCache(clock=clock)
        cache.set("restaurants:41.0:29.0::0", {"data": {"items": []}})
        assert cache.get("restaurants:41.0:29.0::0") == {"data": {"items": []}}

    def test_missing_key_returns_none(self) -> None:
        assert TTLCache().get("nope") is None

    def test_default_ttl_is_ten_minutes(self) -> None:
        assert DEFAULT_TTL_SECONDS == 600
        assert TTLCache().ttl_seconds == 600

    def test_entry_still_valid_at_ttl_boundary(self, clock: FakeClock) -> None:
        cache = TTLCache(clock=clock)
        cache.set("k", "v")
        clock.advance(DEFAULT_TTL_SECONDS)
        assert cache.get("k") == "v"

    def test_expired_entry_is_evicted(self, clock: FakeClock) -> None:
        cache = TTLCache(clock=clock)
        cache.set("k", "v")
        clock.advance(DEFAULT_TTL_SECONDS + 1)
        assert cache.get("k") is None
        assert "k" not in cache
        assert len(cache) == 0

    def test_custom_ttl(self, clock: FakeClock) -> None:
        cache = TTLCache(5, clock=clock)
        cache.set("k", "v")
        clock.advance(6)
        assert cache.get("k") is None

    def test_set_overwrites_and_refreshes(self, clock: FakeClock) -> None:
        cache = TTLCache(clock=clock)
        cache.set("k", "v1")
        clock.advance(500)
        cache.set("k", "v2")
        clock.advance(500)
        assert cache.get("k") == "v2"

    def test_clear_removes_everything(self) -> None:
        cache = TTLCache()
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert len(cache) == 0
        assert cache.get("a") is None

    def test_keys_are_compared_exactly(self) -> None:
        cache = TTLCache()
        cache.set("vendor:abc:41.0:29.0", 1)
        assert cache.get("vendor:abc:41.00:29.0") is None
