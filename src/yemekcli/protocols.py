"""Protocol interfaces for swappable components.

ApiClient and AppState reference these protocols, not the concrete
implementations, so tests can drive the client with lightweight fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping


class StatusCallback(Protocol):
    """Single-subscriber sink for human-facing progress messages."""

    def __call__(self, message: str) -> None: ...


class CacheProtocol(Protocol):
    """Interface for the fetch-result cache."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def clear(self) -> None: ...


class FetcherProtocol(Protocol):
    """Interface for the resilient JSON fetcher."""

    async def fetch_json(self, url: str, headers: Mapping[str, str] | None = None) -> Any: ...
