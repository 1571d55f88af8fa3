from __future__ import annotations

import os

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    backend_url: str = Field(
        "",
        validation_alias=AliasChoices("SANCTUARY_BACKEND_URL", "SUPABASE_URL", "VITE_SUPABASE_URL"),
    )
    backend_key: str = Field(
        "",
        validation_alias=AliasChoices("SANCTUARY_BACKEND_KEY", "SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY"),
    )

    log_level: str = Field("INFO", validation_alias=AliasChoices("SANCTUARY_LOG_LEVEL"))
    request_timeout: float = Field(10.0, validation_alias=AliasChoices("SANCTUARY_REQUEST_TIMEOUT"))
    chat_poll_seconds: float = Field(3.0, validation_alias=AliasChoices("SANCTUARY_CHAT_POLL_SECONDS"))

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    @property
    def is_configured(self) -> bool:
        return bool(self.backend_url.strip() and self.backend_key.strip())

    @property
    def uses_http_backend(self) -> bool:
        return self.backend_url.strip().lower().startswith(("http://", "https://"))


_settings: Settings | None = None


def get_settings(**overrides) -> Settings:
    global _settings
    if overrides:
        return Settings(**overrides)
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None


# For local dev convenience only.
if os.getenv("SANCTUARY_DEBUG_SETTINGS"):
    print(get_settings().model_dump(exclude={"backend_key"}))
