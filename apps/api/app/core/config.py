"""Application configuration."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables.

    ``SUPABASE_URL`` and ``SUPABASE_ANON_KEY`` are required; constructing settings without
    them raises and the process refuses to start.
    """

    app_env: Literal["development", "production", "test"] = "development"
    port: int = Field(default=3000, ge=1, le=65535)
    log_level: str = "INFO"

    supabase_url: AnyHttpUrl
    supabase_anon_key: str = Field(min_length=1)
    supabase_service_role_key: str | None = None
    supabase_storage_bucket: str = Field(default="images", min_length=1)

    cors_allowed_origin: str = "*"
    frontend_url: AnyHttpUrl | None = None

    service_backend: Literal["supabase", "memory"] = "supabase"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("supabase_service_role_key", "frontend_url", mode="before")
    @classmethod
    def _blank_as_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_origins(self) -> list[str]:
        raw = self.cors_allowed_origin.strip()
        if raw == "*" or not raw:
            return ["*"]
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    @property
    def supabase_base_url(self) -> str:
        return str(self.supabase_url).rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def log_config_summary(settings: Settings) -> None:
    """Log the non-secret part of the configuration."""
    logger.info(
        "config.loaded environment=%s port=%s backend=%s supabase_url=%s bucket=%s cors_origin=%s "
        "service_role=%s frontend_url=%s",
        settings.app_env,
        settings.port,
        settings.service_backend,
        settings.supabase_base_url,
        settings.supabase_storage_bucket,
        settings.cors_allowed_origin,
        "configured" if settings.supabase_service_role_key else "missing",
        settings.frontend_url or "not set",
    )
