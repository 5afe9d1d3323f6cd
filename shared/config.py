"""
Centralized configuration for the Eventory backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., SUPABASE_*, AUTH_*).
"""

from functools import lru_cache
from typing import Optional
from urllib.parse import urlparse

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
    app_name: str = "Eventory API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""
    supabase_db_url: str = ""  # direct Postgres URL, used by run_migrations.py

    # Identity resolution
    session_cookie_name: str = ""  # derived from supabase_url when empty
    allow_header_identity: bool = True
    auth_timeout_seconds: float = 5.0

    # File storage
    documents_bucket: str = "event-documents"
    signed_url_expires_in: int = 3600  # seconds

    @property
    def project_ref(self) -> Optional[str]:
        """Supabase project ref, i.e. the first label of the project host."""
        if not self.supabase_url:
            return None
        host = urlparse(self.supabase_url).hostname or ""
        return host.split(".")[0] or None

    @property
    def auth_cookie_name(self) -> str:
        """
        Name of the cookie holding the Supabase session.

        Supabase SSR helpers store the session under sb-<project-ref>-auth-token.
        """
        if self.session_cookie_name:
            return self.session_cookie_name
        ref = self.project_ref or "local"
        return f"sb-{ref}-auth-token"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
