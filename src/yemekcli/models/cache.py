from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A memoized value and the monotonic time it was stored at."""

    value: T
    stored_at: float

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return now - self.stored_at > ttl_seconds
