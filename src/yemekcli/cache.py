"""In-memory TTL cache for fetch results.

Entries live for the lifetime of the process only. There is no size bound:
an entry leaves the store when a read finds it older than the TTL, or when
``clear()`` is called. Keys are plain strings built by the caller, so two
queries share an entry only if their keys are equal.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog

from yemekcli.models.cache import CacheEntry

if TYPE_CHECKING:
    from collections.abc import Callable

log = structlog.get_logger()

DEFAULT_TTL_SECONDS = 10 * 60


class TTLCache:
    """Keyed store with lazy expiry, implementing CacheProtocol."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: dict[str, CacheEntry[Any]] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, key: str) -> Any | None:
        """Return the stored value, or ``None`` on miss. Expired entries are evicted."""
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock(), self._ttl_seconds):
            del self._store[key]
            log.debug("cache_expired", key=key)
            return None
        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._store[key] = CacheEntry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        count = len(self._store)
        self._store.clear()
        log.debug("cache_cleared", entries=count)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store
