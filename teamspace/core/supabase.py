"""Supabase client singleton for database operations."""

from functools import lru_cache
from typing import Any

from supabase import Client, create_client
from supabase.lib.client_options import SyncClientOptions
from supabase_auth import SyncMemoryStorage

from teamspace.core.config import get_settings

# PostgREST error code returned by .single() when the query matched no rows
NO_ROWS_CODE = "PGRST116"

# Postgres unique_violation
UNIQUE_VIOLATION_CODE = "23505"


@lru_cache
def get_supabase_client() -> Client:
    """Get cached Supabase client singleton for database operations.

    Uses the secret key, which bypasses RLS at the PostgREST level.
    Services must verify the caller's authorization themselves before
    reading or writing on their behalf.

    Returns:
        Client: Supabase client instance.
    """
    settings = get_settings()
    return create_client(
        settings.supabase_url,
        settings.supabase_secret_key,
    )


def create_user_client(access_token: str) -> Client:
    """Create a fresh Supabase client that queries as the given user.

    PostgREST receives the caller's access token instead of the service
    key, so row level security decides which rows the query may touch.
    Each call returns an isolated instance; never cache it.

    Args:
        access_token: The caller's Supabase JWT.

    Returns:
        Client: Supabase client scoped to the caller.
    """
    settings = get_settings()
    options = SyncClientOptions(
        storage=SyncMemoryStorage(),
        auto_refresh_token=False,
        persist_session=False,
    )
    client = create_client(
        settings.supabase_url,
        settings.supabase_secret_key,
        options=options,
    )
    client.postgrest.auth(access_token)
    return client


async def check_database_connection() -> dict[str, Any]:
    """Check if database connection is healthy.

    Performs a simple query to verify database connectivity.

    Returns:
        dict: Connection status with 'healthy' boolean and optional 'error' message.
    """
    try:
        client = get_supabase_client()
        client.table("user_settings").select("user_id").limit(1).execute()
        return {"healthy": True}
    except Exception as e:
        return {"healthy": False, "error": str(e)}
