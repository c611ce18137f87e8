"""Application settings using Pydantic Settings for typed configuration.

This module centralizes all configuration and provides type-safe access to settings.
Settings are loaded from environment variables with sensible defaults.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env_name: str = Field(default="development", alias="ENV_NAME")

    # Database
    database_url: str = Field(alias="DATABASE_URL")
    database_create_tables: bool = Field(default=False, alias="DATABASE_CREATE_TABLES")

    # Sessions
    session_secret_key: str = Field(alias="SESSION_SECRET_KEY")
    session_expires_days: int = Field(
        default=30, alias="SESSION_EXPIRES_DAYS", ge=1, le=30
    )

    # CORS
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    # Email (Resend)
    resend_api_key: str | None = Field(default=None, alias="RESEND_API_KEY")
    app_domain: str = Field(default="resend.dev", alias="APP_DOMAIN")
    client_url: str = Field(default="http://localhost:3000", alias="CLIENT_URL")

    # Password reset
    reset_token_ttl_minutes: int = Field(
        default=60, alias="RESET_TOKEN_TTL_MINUTES", ge=1, le=24 * 60
    )

    # Firebase (Google sign-in)
    firebase_project_id: str | None = Field(default=None, alias="FIREBASE_PROJECT_ID")

    # Where users land after signing in
    auth_landing_path: str = Field(default="/", alias="AUTH_LANDING_PATH")

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @computed_field
    @property
    def is_secure_cookie(self) -> bool:
        """Determine if cookies should be set with Secure flag."""
        return self.env_name.lower() not in {"dev", "development", "local", "test"}

    @computed_field
    @property
    def session_max_age(self) -> int:
        """Session cookie lifetime in seconds."""
        return int(timedelta(days=self.session_expires_days).total_seconds())

    @computed_field
    @property
    def reset_token_ttl(self) -> timedelta:
        """Lifetime of a password reset token."""
        return timedelta(minutes=self.reset_token_ttl_minutes)

    @computed_field
    @property
    def email_from(self) -> str:
        """Sender address for transactional email."""
        return f"noreply@{self.app_domain}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
