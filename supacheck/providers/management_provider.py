"""Supabase Management API provider for projects and backup settings."""

from __future__ import annotations

from typing import Any

import httpx

from supacheck.exceptions import ConfigurationError, ManagementAPIError

DEFAULT_MANAGEMENT_API_URL = "https://api.supabase.com/v1"


class ManagementProvider:
    """Read-only client for the management plane (bearer authenticated)."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_MANAGEMENT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not api_key:
            raise ConfigurationError("SUPABASE_MANAGEMENT_API_KEY must be set")
        self._key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._key}",
            "Content-Type": "application/json",
        }

    async def _get(self, path: str) -> Any:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    url,
                    headers=self._get_headers(),
                    timeout=self._timeout,
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise ManagementAPIError(
                e.response.text or e.response.reason_phrase,
                e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ManagementAPIError(f"GET {path} failed: {e}") from e
        except ValueError as e:
            raise ManagementAPIError(f"GET {path} returned invalid JSON: {e}") from e

    async def list_projects(self) -> list[dict[str, Any]]:
        """``GET /projects``: every project visible to the API key."""
        data = await self._get("/projects")
        if not isinstance(data, list):
            raise ManagementAPIError("GET /projects did not return a list")
        return data

    async def get_backup_config(self, project_id: str) -> dict[str, Any]:
        """``GET /projects/{id}/database/backups`` for one project."""
        data = await self._get(f"/projects/{project_id}/database/backups")
        return data if isinstance(data, dict) else {}
