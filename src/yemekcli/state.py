"""Process-scoped runtime state.

AppState is created once per session (see ``runtime.open_session``) and
handed to every ApiClient. The CooldownState inside it is the one piece of
mutable state shared by all clients and all concurrent fetches: the
upstream blocks per network identity, not per session.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from yemekcli.config import Settings
    from yemekcli.protocols import StatusCallback


def _discard_status(message: str) -> None:
    pass


@dataclass
class CooldownState:
    """Shared "do not call upstream before" timestamp on the monotonic clock.

    Writes are plain assignments; with concurrent writers the last one wins,
    which is fine since the window only has to be long enough.
    """

    until: float = -math.inf

    def remaining(self, now: float) -> float:
        return max(0.0, self.until - now)

    def is_active(self, now: float) -> bool:
        return self.until > now

    def activate(self, seconds: float, now: float) -> None:
        self.until = now + seconds

    def clear(self) -> None:
        self.until = -math.inf


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every ApiClient."""

    settings: Settings
    http_client: httpx.AsyncClient | None = None
    cooldown: CooldownState = field(default_factory=CooldownState)
    status: StatusCallback = _discard_status
