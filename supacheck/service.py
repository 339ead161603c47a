"""Entry points used by the HTTP and CLI dispatchers."""

from __future__ import annotations

import asyncio
import logging

from config.settings import Settings
from supacheck.exceptions import ConfigurationError, PipelineError
from supacheck.models import CheckKind, ComplianceResultSet
from supacheck.pipelines import IdentityMFAPipeline, ProjectPITRPipeline, TableRLSPipeline
from supacheck.providers import DatabaseProvider, IdentityProvider, ManagementProvider
from supacheck.supabase_client import get_async_supabase_client


class ComplianceService:
    """Runs the three compliance pipelines against live upstream state.

    Nothing is cached between calls; each operation builds a new pipeline
    and returns a fresh result set.
    """

    def __init__(
        self,
        identity: IdentityProvider | None = None,
        database: DatabaseProvider | None = None,
        management: ManagementProvider | None = None,
        logger: logging.Logger | None = None,
    ):
        self.identity = identity
        self.database = database
        self.management = management
        self.logger = logger or logging.getLogger("supacheck")

    @classmethod
    async def from_settings(
        cls, settings: Settings, logger: logging.Logger | None = None
    ) -> "ComplianceService":
        """Build providers for whichever credentials are configured."""
        identity = database = management = None
        if settings.supabase_url and settings.supabase_service_role_key:
            client = await get_async_supabase_client(settings)
            identity = IdentityProvider(client)
            database = DatabaseProvider(client, settings.rls_status_function)
        if settings.supabase_management_api_key:
            management = ManagementProvider(
                api_key=settings.supabase_management_api_key,
                base_url=settings.management_api_url,
                timeout=settings.request_timeout,
            )
        return cls(identity, database, management, logger)

    def _child(self, kind: CheckKind) -> logging.Logger:
        return self.logger.getChild(kind.value)

    async def get_identity_mfa_status(self) -> ComplianceResultSet:
        if self.identity is None:
            raise ConfigurationError("SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set")
        return await IdentityMFAPipeline(self.identity, self._child(CheckKind.MFA)).run()

    async def get_table_rls_status(self) -> ComplianceResultSet:
        if self.database is None:
            raise ConfigurationError("SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set")
        return await TableRLSPipeline(self.database, self._child(CheckKind.RLS)).run()

    async def get_project_pitr_status(self) -> ComplianceResultSet:
        if self.management is None:
            raise ConfigurationError("SUPABASE_MANAGEMENT_API_KEY is not set")
        return await ProjectPITRPipeline(self.management, self._child(CheckKind.PITR)).run()

    async def get_status(self, kind: CheckKind) -> ComplianceResultSet:
        operations = {
            CheckKind.MFA: self.get_identity_mfa_status,
            CheckKind.RLS: self.get_table_rls_status,
            CheckKind.PITR: self.get_project_pitr_status,
        }
        return await operations[kind]()

    async def get_all_statuses(
        self,
    ) -> dict[CheckKind, ComplianceResultSet | PipelineError]:
        """Run every pipeline concurrently; a hard failure stays in its slot."""
        kinds = list(CheckKind)
        results = await asyncio.gather(
            *(self.get_status(kind) for kind in kinds), return_exceptions=True
        )
        statuses: dict[CheckKind, ComplianceResultSet | PipelineError] = {}
        for kind, result in zip(kinds, results):
            if isinstance(result, ConfigurationError):
                self.logger.warning("Skipping %s check: %s", kind.value, result)
                result = PipelineError(kind.value, str(result))
            elif isinstance(result, BaseException) and not isinstance(result, PipelineError):
                raise result
            statuses[kind] = result
        return statuses
