"""PostgREST provider for the row-level security aggregate query."""

from __future__ import annotations

from typing import Any

from supabase._async.client import AsyncClient

from supacheck.exceptions import DatabaseAPIError


class DatabaseProvider:
    """Calls the database function that reports RLS flags for all tables."""

    def __init__(self, client: AsyncClient, function_name: str = "get_rls_status"):
        self._client = client
        self._function_name = function_name

    async def get_rls_status(self) -> list[dict[str, Any]]:
        """Return ``[{table_name, rls_enabled}]`` for every table."""
        try:
            response = await self._client.rpc(self._function_name).execute()
        except Exception as e:
            raise DatabaseAPIError(
                f"RPC {self._function_name} failed: {e}",
                getattr(e, "status", None),
            ) from e
        return response.data or []
