"""
Centralized configuration for the Teamdesk backend.

All settings are loaded from environment variables with sensible defaults.
Settings are read once by the service container and handed to each service
explicitly; only the app factory and route dependencies call get_settings().
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Teamdesk API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # Bearer tokens
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "teamdesk"
    access_token_ttl_hours: int = Field(default=24, ge=1)

    # Single-use token ledger
    email_verification_ttl_hours: int = Field(default=24, ge=1)
    password_reset_ttl_hours: int = Field(default=24, ge=1)
    blacklist_ttl_hours: int = Field(default=24, ge=1)
    ledger_token_bytes: int = Field(default=32, ge=32)

    # Password hashing
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Invitation codes (an empty code never matches)
    admin_invitation_code: str = ""
    manager_invitation_code: str = ""

    # Links embedded in emails
    public_base_url: str = "http://localhost:8000"
    frontend_url: str = "http://localhost:5173"

    # SMTP (dev mode logs instead of sending when host or sender is unset)
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    email_from: Optional[str] = None
    email_from_name: str = "Teamdesk"

    @field_validator("jwt_algorithm")
    @classmethod
    def _hmac_only(cls, value: str) -> str:
        if value not in ("HS256", "HS384", "HS512"):
            raise ValueError("jwt_algorithm must be an HMAC algorithm (HS256, HS384, HS512)")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
