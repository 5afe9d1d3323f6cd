"""
Database client factory for Supabase.

Provides the service-role client used for all backend data access. Row Level
Security is bypassed by this client, so every route must run the
application-level authorization check (modules.authorization) before touching
data.
"""

from typing import Optional
from supabase import create_client, Client

from .config import get_settings

# Process-wide clients, built once and injected through the service container
_service_client: Optional[Client] = None
_auth_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def get_supabase_auth_client() -> Client:
    """
    Get Supabase client with the anon key.

    Used only to ask the identity provider about bearer tokens
    (auth.get_user). Never used for table access.
    """
    global _auth_client

    if _auth_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
            )
        _auth_client = create_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _auth_client


def reset_client_cache() -> None:
    """
    Reset the cached database clients.

    Useful for testing or when configuration changes.
    """
    global _service_client, _auth_client
    _service_client = None
    _auth_client = None
