"""Shared test fixtures for the yemekcli test suite."""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx
import pytest

from yemekcli.config import CredentialSettings, Settings
from yemekcli.fetcher import ResilientFetcher
from yemekcli.models.credentials import Credentials
from yemekcli.state import AppState, CooldownState

BASE_URL = "https://tr.fd-api.com"


@dataclass
class FakeClock:
    """Monotonic clock whose sleeps advance time instantly and are recorded."""

    now: float = 1000.0
    sleeps: list[float] = field(default_factory=list)

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class StatusRecorder:
    messages: list[str] = field(default_factory=list)

    def __call__(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def status() -> StatusRecorder:
    return StatusRecorder()


@pytest.fixture()
def cooldown() -> CooldownState:
    return CooldownState()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        credentials=CredentialSettings(
            token="test-token",
            user_id="TR_123",
            perseus_client_id="client-1",
            perseus_session_id="session-1",
        )
    )


@pytest.fixture()
def credentials(settings: Settings) -> Credentials:
    return settings.to_credentials()


@pytest.fixture()
async def http_client():
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
def app_state(
    settings: Settings,
    http_client: httpx.AsyncClient,
    cooldown: CooldownState,
    status: StatusRecorder,
) -> AppState:
    return AppState(settings=settings, http_client=http_client, cooldown=cooldown, status=status)


@pytest.fixture()
def fetcher(
    http_client: httpx.AsyncClient,
    cooldown: CooldownState,
    status: StatusRecorder,
    clock: FakeClock,
) -> ResilientFetcher:
    """Fetcher with instant, recorded sleeps."""
    return ResilientFetcher(http_client, cooldown, status, clock=clock, sleep=clock.sleep)


@pytest.fixture()
def challenge_page() -> str:
    """Trimmed copy of the interstitial served with HTTP 403."""
    return (
        "<html><head><script>window._pxAppId = 'PXlJuB4eTB';</script>"
        '<script src="/PXlJuB4eTB/init.js"></script></head>'
        "<body><div id='px-captcha'></div>"
        '<script src="https://captcha.px-cdn.net/PXlJuB4eTB/captcha.js"></script>'
        "</body></html>"
    )
