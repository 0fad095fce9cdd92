"""Application configuration management using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from the environment (or a local .env file).

    The Supabase connection and signing key are required; everything else
    has a development default.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="studio-directory", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    # Supabase
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_secret_key: str = Field(..., description="Supabase secret key for backend operations")
    supabase_signing_key_jwk: str = Field(..., description="Supabase signing key JWK (JSON string) for JWT token verification")

    # Claims
    site_url: str = Field(
        default="https://studio-directory.com",
        description="Public site URL used to build claim links",
    )
    claim_link_ttl_days: int = Field(default=14, ge=1, description="Days until an issued claim link expires")
    admin_user_ids: str = Field(
        default="",
        description="Comma-separated identities granted admin access in addition to app_metadata.role",
    )

    # Email (Resend)
    resend_api_key: str = Field(default="", description="Resend API key for sending emails")
    email_from_address: str = Field(
        default="Studio Directory <noreply@studio-directory.com>",
        description="From address for transactional emails",
    )
    admin_notification_email: str = Field(
        default="",
        description="Mailbox notified when a claim request is submitted",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def admin_user_ids_list(self) -> list[str]:
        """Parse admin identities string into a list."""
        return [uid.strip() for uid in self.admin_user_ids.split(",") if uid.strip()]

    @property
    def site_base_url(self) -> str:
        """Site URL without a trailing slash."""
        return self.site_url.rstrip("/") or "https://studio-directory.com"

    @property
    def email_enabled(self) -> bool:
        """Check whether transactional email is configured."""
        return bool(self.resend_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Call get_settings.cache_clear() to reload after changing the environment.
    """
    return Settings()
