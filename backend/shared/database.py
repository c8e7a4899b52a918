"""
Database client factory for Supabase.

Provides both service-role clients (for backend operations bypassing RLS)
and anonymous clients (for identity operations such as password sign-in).
Every client carries a bounded PostgREST timeout so no store call can
block a request indefinitely.
"""

from typing import Optional
from supabase import create_client, Client, ClientOptions

from .config import get_settings

# Module-level client cache
_service_client: Optional[Client] = None


def _client_options() -> ClientOptions:
    settings = get_settings()
    return ClientOptions(
        postgrest_client_timeout=settings.store_timeout_seconds,
        auto_refresh_token=False,
        persist_session=False,
    )


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Use this for backend operations that need full database access,
    such as session bookkeeping and payment reconciliation.

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
            options=_client_options(),
        )

    return _service_client


def get_supabase_anon_client() -> Client:
    """
    Get a fresh Supabase client using the anon key.

    Not cached: the auth namespace keeps the signed-in session on the
    client, so each sign-in gets its own instance.

    Returns:
        Supabase client configured with the anon key
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
        )

    return create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=_client_options(),
    )


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _service_client
    _service_client = None
