"""
storefront_api.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Carry the process-wide API authentication policy (auth-required flag, user model).
- Offer a cached settings instance for entrypoints.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration, prefixed with ``STOREFRONT_``.

    Request handling never reads this object directly; `create_app` derives the
    read-only `ApiConfig` from it once and injects that into the auth pipeline.
    """

    model_config = SettingsConfigDict(env_prefix="STOREFRONT_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "storefront-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # API authentication policy
    requires_authentication: bool = False
    user_model: str = "storefront_api.db.models.User"

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./storefront.db"

    # Payment gateway used when capturing checkout payments
    payment_gateway_url: str = "http://localhost:9090"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars on every call.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# `requires_authentication` and `user_model` are process-wide and read-only once the
# app is built; see `storefront_api.auth.config.ApiConfig`.
