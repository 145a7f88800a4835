"""Unit tests for session wiring."""

from __future__ import annotations

import httpx
import pytest
import respx

from yemekcli.client import ApiClient
from yemekcli.config import CredentialSettings, Settings
from yemekcli.errors import ConfigurationError
from yemekcli.runtime import open_session


class TestOpenSession:
    async def test_yields_client_and_closes_http(self, settings: Settings) -> None:
        messages: list[str] = []
        async with open_session(settings, status=messages.append, configure_logging=False) as api:
            assert isinstance(api, ApiClient)
            assert api.credentials.auth_token == "test-token"
            http_client = api._state.http_client
            assert http_client is not None
            with respx.mock:
                respx.get(host="tr.fd-api.com", path="/vendors-gateway/api/v1/pandora/vendors").mock(
                    return_value=httpx.Response(200, json={"data": {"items": []}})
                )
                await api.get_restaurants(41.0, 29.0)
                await api.get_restaurants(41.0, 29.0)
        assert http_client.is_closed
        assert messages == ["Loaded from cache"]

    async def test_missing_token(self) -> None:
        settings = Settings(credentials=CredentialSettings())
        with pytest.raises(ConfigurationError):
            async with open_session(settings, configure_logging=False):
                pass
