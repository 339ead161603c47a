"""Supabase client for Supacheck."""

from __future__ import annotations

from supabase._async.client import create_client as create_async_client, AsyncClient

from config.settings import Settings, settings as default_settings
from supacheck.exceptions import ConfigurationError

_async_client: AsyncClient | None = None


async def get_async_supabase_client(settings: Settings | None = None) -> AsyncClient:
    """Return a singleton service-role Supabase client (async)."""
    global _async_client
    if _async_client is None:
        settings = settings or default_settings
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise ConfigurationError("SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set")
        _async_client = await create_async_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )
    return _async_client


def reset_async_supabase_client() -> None:
    """Drop the cached client so the next call builds a fresh one."""
    global _async_client
    _async_client = None
