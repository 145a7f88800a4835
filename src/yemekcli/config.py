"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (YEMEKCLI__CREDENTIALS__TOKEN=...)
  2. yemekcli.yaml          (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional, but a bearer token must come from somewhere
before an ApiClient can be built.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from yemekcli.errors import ConfigurationError
from yemekcli.models.credentials import Credentials

_CONFIG_FILE_NAME = "yemekcli.yaml"


def _find_config_file() -> str | None:
    """Return the path of the first yemekcli.yaml found, or None."""
    candidates = [
        Path(_CONFIG_FILE_NAME),
        Path(platformdirs.user_config_dir("yemekcli")) / _CONFIG_FILE_NAME,
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ApiSettings(BaseModel):
    base_url: str = "https://tr.fd-api.com"
    language_id: str = "2"
    country: str = "tr"
    api_key: str = "volo"
    client_id: str = "web"
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    )
    timeout_seconds: float = 30.0


class FetcherSettings(BaseModel):
    # One attempt per delay: the length of this list is the attempt budget.
    retry_delays_seconds: list[float] = Field(default_factory=lambda: [3.0, 8.0, 20.0, 45.0])
    cooldown_seconds: float = 60.0
    body_prefix_chars: int = 200


class CacheSettings(BaseModel):
    ttl_seconds: float = 600.0


class CredentialSettings(BaseModel):
    token: str = ""
    user_id: str = ""
    customer_hash: str = ""
    perseus_client_id: str = ""
    perseus_session_id: str = ""


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: YEMEKCLI__CACHE__TTL_SECONDS=60
        env_prefix="YEMEKCLI__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    api: ApiSettings = ApiSettings()
    fetcher: FetcherSettings = FetcherSettings()
    cache: CacheSettings = CacheSettings()
    credentials: CredentialSettings = CredentialSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
        )

    def to_credentials(self) -> Credentials:
        """Build the immutable credential bundle. Raises if no token is configured."""
        creds = self.credentials
        if not creds.token:
            raise ConfigurationError("No bearer token configured.")
        return Credentials(
            auth_token=creds.token,
            user_id=creds.user_id,
            customer_hash=creds.customer_hash,
            perseus_client_id=creds.perseus_client_id,
            perseus_session_id=creds.perseus_session_id,
        )
