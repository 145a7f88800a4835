"""Resilient JSON fetcher for the bot-protected upstream API.

Every request goes through ResilientFetcher.fetch_json, which:

1. waits out the shared cooldown if a recent challenge set one,
2. issues the request,
3. on a 403 challenge page, extends the cooldown and backs off on a fixed
   schedule before the next attempt,
4. fails fast on any other non-2xx status.

The retry loop is driven by an explicit state machine (``FetchState`` and
``TRANSITIONS``) so each run can be checked against the allowed edges.
The fetcher receives an httpx.AsyncClient via constructor injection; the
session lifespan owns the client lifecycle.
"""

from __future__ import annotations

import asyncio
import math
import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from yemekcli.challenge import is_challenge
from yemekcli.errors import (
    ChallengeExhaustedError,
    HttpStatusError,
    InvalidResponseError,
    NetworkError,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping, Sequence

    from yemekcli.config import ApiSettings
    from yemekcli.protocols import StatusCallback
    from yemekcli.state import CooldownState

log = structlog.get_logger()

DEFAULT_RETRY_DELAYS: tuple[float, ...] = (3.0, 8.0, 20.0, 45.0)
DEFAULT_COOLDOWN_SECONDS = 60.0
DEFAULT_BODY_PREFIX_CHARS = 200
CHALLENGE_STATUS = 403


def build_http_client(settings: ApiSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once per session."""
    return httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": settings.user_agent},
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class FetchState(StrEnum):
    READY = "ready"
    COOLDOWN_WAIT = "cooldown_wait"
    ATTEMPTING = "attempting"
    CHALLENGED = "challenged"
    BACKOFF_WAIT = "backoff_wait"
    SUCCESS = "success"
    # Terminal failure of the exchange itself: non-2xx, transport error or unreadable body.
    HTTP_ERROR = "http_error"
    EXHAUSTED = "exhausted"


TRANSITIONS: dict[FetchState, frozenset[FetchState]] = {
    FetchState.READY: frozenset({FetchState.COOLDOWN_WAIT, FetchState.ATTEMPTING}),
    FetchState.COOLDOWN_WAIT: frozenset({FetchState.ATTEMPTING}),
    FetchState.ATTEMPTING: frozenset(
        {FetchState.SUCCESS, FetchState.CHALLENGED, FetchState.HTTP_ERROR}
    ),
    FetchState.CHALLENGED: frozenset({FetchState.BACKOFF_WAIT}),
    FetchState.BACKOFF_WAIT: frozenset({FetchState.ATTEMPTING, FetchState.EXHAUSTED}),
    FetchState.SUCCESS: frozenset(),
    FetchState.HTTP_ERROR: frozenset(),
    FetchState.EXHAUSTED: frozenset(),
}


@dataclass
class FetchRun:
    """Bookkeeping for a single ``fetch_json`` call."""

    url: str
    state: FetchState = FetchState.READY
    attempts: int = 0
    history: list[FetchState] = field(default_factory=lambda: [FetchState.READY])

    @property
    def finished(self) -> bool:
        return not TRANSITIONS[self.state]

    def advance(self, target: FetchState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal fetch transition {self.state} -> {target}")
        if target is FetchState.ATTEMPTING:
            self.attempts += 1
        self.state = target
        self.history.append(target)


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------


class ResilientFetcher:
    """JSON fetcher with challenge detection, shared cooldown and fixed backoff."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cooldown: CooldownState,
        status: StatusCallback,
        *,
        retry_delays: Sequence[float] = DEFAULT_RETRY_DELAYS,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        body_prefix_chars: int = DEFAULT_BODY_PREFIX_CHARS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if not retry_delays:
            raise ValueError("retry_delays must hold at least one delay")
        self._client = client
        self._cooldown = cooldown
        self._status = status
        self._retry_delays = tuple(retry_delays)
        self._cooldown_seconds = cooldown_seconds
        self._body_prefix_chars = body_prefix_chars
        self._clock = clock
        self._sleep = sleep
        self.last_run: FetchRun | None = None

    @property
    def max_attempts(self) -> int:
        return len(self._retry_delays)

    async def fetch_json(self, url: str, headers: Mapping[str, str] | None = None) -> Any:
        """Fetch ``url`` and return its decoded JSON body.

        Raises ChallengeExhaustedError when every attempt hit the challenge
        page, HttpStatusError for any other non-2xx status (never retried),
        NetworkError on transport failure and InvalidResponseError when a
        2xx body is not JSON.
        """
        run = FetchRun(url=url)
        self.last_run = run

        await self._wait_for_cooldown(run)

        for attempt_index, delay in enumerate(self._retry_delays):
            run.advance(FetchState.ATTEMPTING)
            response = await self._send(run, headers)
            body = response.text

            if response.status_code == CHALLENGE_STATUS and is_challenge(body):
                run.advance(FetchState.CHALLENGED)
                self._cooldown.activate(self._cooldown_seconds, self._clock())
                log.warning(
                    "challenge_detected",
                    url=url,
                    attempt=run.attempts,
                    max_attempts=self.max_attempts,
                    backoff_seconds=delay,
                )
                self._notify_challenge(attempt_index, delay)
                run.advance(FetchState.BACKOFF_WAIT)
                await self._sleep(delay)
                continue

            # Any real answer means the block has lifted.
            self._cooldown.clear()

            if not response.is_success:
                run.advance(FetchState.HTTP_ERROR)
                log.warning("fetch_failed", url=url, status_code=response.status_code)
                raise HttpStatusError(response.status_code, body[: self._body_prefix_chars])

            try:
                data = response.json()
            except ValueError as exc:
                run.advance(FetchState.HTTP_ERROR)
                raise InvalidResponseError(f"Response from {url} is not valid JSON") from exc

            run.advance(FetchState.SUCCESS)
            log.info(
                "fetch_complete",
                url=url,
                status_code=response.status_code,
                attempts=run.attempts,
            )
            return data

        run.advance(FetchState.EXHAUSTED)
        log.error("challenge_exhausted", url=url, attempts=run.attempts)
        raise ChallengeExhaustedError(run.attempts)

    async def _wait_for_cooldown(self, run: FetchRun) -> None:
        remaining = self._cooldown.remaining(self._clock())
        if remaining <= 0:
            return
        run.advance(FetchState.COOLDOWN_WAIT)
        log.info("cooldown_wait", url=run.url, remaining_seconds=remaining)
        self._status(f"Challenge cooldown active, waiting {math.ceil(remaining)}s...")
        await self._sleep(remaining)

    async def _send(self, run: FetchRun, headers: Mapping[str, str] | None) -> httpx.Response:
        try:
            return await self._client.get(run.url, headers=headers)
        except httpx.HTTPError as exc:
            run.advance(FetchState.HTTP_ERROR)
            log.warning("fetch_network_error", url=run.url, error=str(exc))
            raise NetworkError(run.url, str(exc)) from exc

    def _notify_challenge(self, attempt_index: int, delay: float) -> None:
        next_attempt = attempt_index + 2
        if next_attempt <= self.max_attempts:
            self._status(
                f"Challenge detected, waiting {delay:.0f}s before retry "
                f"(attempt {next_attempt}/{self.max_attempts})"
            )
        else:
            self._status(f"Challenge detected on final attempt, waiting {delay:.0f}s...")
