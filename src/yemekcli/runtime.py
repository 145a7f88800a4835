"""Session wiring for the data-access layer.

Responsibilities (and nothing more):
- Configure structlog
- Create the shared AppState (HTTP client, cooldown, status sink)
- Hand an ApiClient to the caller and close the HTTP client afterwards
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog

from yemekcli import __version__
from yemekcli.client import ApiClient
from yemekcli.config import Settings
from yemekcli.fetcher import build_http_client
from yemekcli.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from yemekcli.protocols import StatusCallback

log = structlog.get_logger()


def setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr, stdout belongs to the terminal UI
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def open_session(
    settings: Settings | None = None,
    *,
    status: StatusCallback | None = None,
    configure_logging: bool = True,
) -> AsyncGenerator[ApiClient, None]:
    """Create and tear down the shared resources for one client session."""
    if settings is None:
        settings = Settings()
    if configure_logging:
        setup_logging(settings)

    credentials = settings.to_credentials()
    http_client = build_http_client(settings.api)
    state = AppState(settings=settings, http_client=http_client)
    if status is not None:
        state.status = status

    log.info("session_starting", version=__version__, base_url=settings.api.base_url)
    try:
        yield ApiClient(credentials, state)
    finally:
        await http_client.aclose()
        log.info("session_closed")
