"""Supabase Auth admin provider for users and their MFA factors."""

from __future__ import annotations

from typing import Any

from supabase._async.client import AsyncClient

from supacheck.exceptions import IdentityAPIError


def _as_dict(record: Any) -> dict[str, Any]:
    """Normalize a gotrue model (or plain mapping) to a dict."""
    if isinstance(record, dict):
        return record
    if hasattr(record, "model_dump"):
        return record.model_dump(mode="json")
    return dict(vars(record))


class IdentityProvider:
    """Reads tenant users and enrolled factors through the auth admin API."""

    def __init__(self, client: AsyncClient, per_page: int = 1000):
        self._client = client
        self._per_page = per_page

    async def list_users(self) -> list[dict[str, Any]]:
        """Fetch every user, following pages until a short page is returned."""
        users: list[dict[str, Any]] = []
        page = 1
        while True:
            try:
                batch = await self._client.auth.admin.list_users(
                    page=page, per_page=self._per_page
                )
            except Exception as e:
                raise IdentityAPIError(
                    f"Failed to list users: {e}", getattr(e, "status", None)
                ) from e
            batch = list(batch or [])
            users.extend(_as_dict(u) for u in batch)
            if len(batch) < self._per_page:
                return users
            page += 1

    async def list_factors(self, user_id: str) -> list[dict[str, Any]]:
        """Fetch all factors (any status) enrolled by a user."""
        try:
            response = await self._client.auth.admin.mfa.list_factors({"user_id": user_id})
        except Exception as e:
            raise IdentityAPIError(
                f"Failed to list factors for user {user_id}: {e}",
                getattr(e, "status", None),
            ) from e
        factors = getattr(response, "factors", response)
        return [_as_dict(f) for f in factors or []]
