"""Identity-MFA pipeline: verified factor enrollment per user."""

from __future__ import annotations

import logging
from typing import Any

from supacheck.exceptions import PipelineError, UpstreamError
from supacheck.models import CheckKind, ComplianceResultSet, IdentityMFAItem, MFAFactor
from supacheck.pipelines.base import Pipeline, fan_out
from supacheck.providers.identity_provider import IdentityProvider

VERIFIED_STATUS = "verified"
LOOKUP_ERROR = "Failed to retrieve MFA factors"


def verified_factors(factors: list[dict[str, Any]]) -> list[MFAFactor]:
    """Keep factors whose possession was confirmed, in upstream order."""
    return [MFAFactor.from_row(f) for f in factors if f.get("status") == VERIFIED_STATUS]


class IdentityMFAPipeline(Pipeline):
    """Checks that every user in the tenant has at least one verified factor."""

    kind = CheckKind.MFA

    def __init__(self, provider: IdentityProvider, logger: logging.Logger | None = None):
        super().__init__(logger)
        self.provider = provider

    async def run(self) -> ComplianceResultSet:
        try:
            users = await self.provider.list_users()
        except UpstreamError as e:
            self.logger.error("Error fetching users: %s", e)
            raise PipelineError(self.kind.value, "Failed to retrieve users") from e

        valid_users = []
        for user in users:
            if not isinstance(user, dict) or not user.get("id"):
                self.logger.warning("Skipping user row without id: %s", user)
                continue
            valid_users.append(user)

        outcomes = await fan_out(valid_users, self._lookup)

        items = []
        for outcome in outcomes:
            user = outcome.entity
            user_id = str(user.get("id", ""))
            email = user.get("email") or None
            identifier = email or user_id
            if outcome.ok:
                item = IdentityMFAItem(
                    identifier=identifier,
                    enabled=len(outcome.value) > 0,
                    detail=outcome.value,
                    user_id=user_id,
                    email=email,
                )
                if not item.enabled:
                    self.logger.warning(
                        "MFA check failed for user %s. Enable MFA for user to resolve failed check",
                        identifier,
                        extra={"fields": {"check": self.kind.value, "user_id": user_id}},
                    )
            else:
                self.logger.error(
                    "Failed to fetch MFA factors for user %s: %s",
                    user_id,
                    outcome.error,
                    extra={"fields": {"check": self.kind.value, "user_id": user_id}},
                )
                item = IdentityMFAItem(
                    identifier=identifier,
                    enabled=None,
                    error=LOOKUP_ERROR,
                    user_id=user_id,
                    email=email,
                )
            items.append(item)

        return ComplianceResultSet(kind=self.kind, items=items)

    async def _lookup(self, user: dict[str, Any]) -> list[MFAFactor]:
        factors = await self.provider.list_factors(str(user.get("id", "")))
        return verified_factors(factors)
