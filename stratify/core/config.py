"""Configuration settings using Pydantic Settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Backend (both must be present, otherwise the app runs on demo data)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    backend_timeout_seconds: float = 10.0

    environment: Literal["development", "production"] = "development"
    log_level: str = "INFO"
    api_docs_enabled: bool | None = None

    # Dashboard sessions
    session_cookie_name: str = "stratify_session"
    session_cookie_secure: bool | None = None
    session_ttl_seconds: int = 1800
    session_restore_timeout_seconds: float = 5.0

    # Demo accounts (mock mode only)
    demo_password: str = "demo123"

    # Bulk import
    max_upload_bytes: int = 10 * 1024 * 1024

    # Metrics (required as a bearer token in production)
    metrics_token: str | None = None

    # CORS
    cors_allow_origins: list[str] = ["http://localhost:5173"]
    cors_allow_methods: list[str] = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    cors_allow_headers: list[str] = [
        "Accept",
        "Content-Type",
        "X-Request-ID",
        "X-Metrics-Token",
    ]
    cors_allow_credentials: bool = True

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _parse_csv_lists(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("supabase_url", "supabase_anon_key", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def backend_configured(self) -> bool:
        """True when both backend URL and API key are present."""
        return bool(self.supabase_url) and bool(self.supabase_anon_key)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> Settings:
        if self.environment != "production":
            return self

        if self.supabase_url and not self.supabase_url.startswith("https://"):
            raise ValueError("SUPABASE_URL must use https in production")

        if any(x == "*" for x in self.cors_allow_origins):
            raise ValueError("CORS_ALLOW_ORIGINS cannot contain '*' in production")
        if any(x == "*" for x in self.cors_allow_methods):
            raise ValueError("CORS_ALLOW_METHODS cannot contain '*' in production")

        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
