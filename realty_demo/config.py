from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("realty_demo.config")


class Settings(BaseSettings):
    """
    Central configuration for the Realty Growth Demo backend.

    - Reads from .env (local) and process environment.
    - Every value has a default so the demo boots with no env at all.
    - Ignores extra env vars so adding new ones doesn't break startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core app
    # -------------------------------------------------------------------------
    app_name: str = Field(default="Realty Growth Demo", alias="APP_NAME")
    debug: bool = Field(default=False, alias="DEBUG")
    environment: str = Field(default="local", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    cors_origins_raw: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
    )

    @property
    def cors_origins(self) -> list[str]:
        """Comma-separated CORS_ORIGINS as a list. Safe if empty."""
        return [
            origin.strip()
            for origin in self.cors_origins_raw.split(",")
            if origin.strip()
        ]

    # -------------------------------------------------------------------------
    # Snapshot storage
    # -------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite:///./realty_demo.db",
        alias="DATABASE_URL",
    )
    demo_storage_key: str = Field(
        default="ai-realestate-sample-mode",
        alias="DEMO_STORAGE_KEY",
    )

    # -------------------------------------------------------------------------
    # Demo pacing (seconds)
    # -------------------------------------------------------------------------
    demo_follow_up_clear_seconds: float = Field(
        default=3.0,
        alias="DEMO_FOLLOW_UP_CLEAR_SECONDS",
        ge=0,
    )
    demo_client_reply_seconds: float = Field(
        default=1.5,
        alias="DEMO_CLIENT_REPLY_SECONDS",
        ge=0,
    )
    demo_pump_interval_seconds: float = Field(
        default=0.25,
        alias="DEMO_PUMP_INTERVAL_SECONDS",
        gt=0,
    )


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader so config is evaluated once per process.
    """
    settings = Settings()
    logger.info(
        "Settings loaded (env=%s, debug=%s, storage_key=%s)",
        settings.environment,
        settings.debug,
        settings.demo_storage_key,
    )
    return settings


settings: Settings = get_settings()
