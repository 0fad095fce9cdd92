"""Supabase client singleton for database operations."""

import logging
from functools import lru_cache
from typing import Any

import httpx
from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import Client, create_client

from studio_directory.api.middleware.error_handler import StoreError
from studio_directory.core.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_supabase_client() -> Client:
    """Get cached Supabase client singleton for database operations.

    Uses secret key (sb_secret_) for backend operations, which bypasses RLS
    at the PostgREST level. This should only be used for server-side
    database operations where proper authorization has already been verified.

    Returns:
        Client: Supabase client instance.
    """
    settings = get_settings()
    return create_client(
        settings.supabase_url,
        settings.supabase_secret_key,
    )


def execute(query: Any, operation: str) -> Any:
    """Execute a PostgREST query, translating store failures into StoreError.

    Args:
        query: A query builder from the Supabase client.
        operation: Short description used in the log line.

    Returns:
        The API response from the query.

    Raises:
        StoreError: If the database or transport reports a failure.
    """
    try:
        return query.execute()
    except PostgrestAPIError as e:
        logger.error("Database error during %s: %s (code=%s)", operation, e.message, e.code)
        raise StoreError() from e
    except httpx.HTTPError as e:
        logger.error("Database transport error during %s: %s", operation, str(e))
        raise StoreError() from e


async def check_database_connection(table: str = "profiles") -> dict[str, Any]:
    """Check that a table answers a one-row select.

    Returns:
        dict: Connection status with 'healthy' boolean and optional 'error' message.
    """
    try:
        client = get_supabase_client()
        client.table(table).select("id").limit(1).execute()
        return {"healthy": True}
    except Exception as e:
        return {"healthy": False, "error": str(e)}
