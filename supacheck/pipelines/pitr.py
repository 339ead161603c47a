"""Project-PITR pipeline: backup configuration per project."""

from __future__ import annotations

import logging
from typing import Any

from supacheck.exceptions import PipelineError, UpstreamError
from supacheck.models import CheckKind, ComplianceResultSet, ProjectPITRItem, ProjectRef
from supacheck.pipelines.base import Pipeline, fan_out
from supacheck.providers.management_provider import ManagementProvider

LOOKUP_ERROR = "Failed to retrieve PITR status"


class ProjectPITRPipeline(Pipeline):
    """Checks that point-in-time recovery is enabled on every project."""

    kind = CheckKind.PITR

    def __init__(self, provider: ManagementProvider, logger: logging.Logger | None = None):
        super().__init__(logger)
        self.provider = provider

    async def run(self) -> ComplianceResultSet:
        try:
            projects = await self.provider.list_projects()
        except UpstreamError as e:
            self.logger.error("Error fetching projects: %s", e)
            raise PipelineError(
                self.kind.value, "Failed to retrieve projects and PITR status"
            ) from e

        refs = []
        for project in projects:
            if not isinstance(project, dict) or not project.get("id"):
                self.logger.warning("Skipping project row without id: %s", project)
                continue
            refs.append(
                ProjectRef(project_id=str(project["id"]), project_name=project.get("name") or "")
            )
        outcomes = await fan_out(refs, self._lookup)

        items = []
        for outcome in outcomes:
            ref = outcome.entity
            identifier = ref.project_name or ref.project_id
            fields = {
                "check": self.kind.value,
                "project_id": ref.project_id,
                "project_name": ref.project_name,
            }
            if outcome.ok:
                item = ProjectPITRItem(identifier=identifier, enabled=outcome.value, project=ref)
                if not item.enabled:
                    self.logger.warning(
                        "PITR check failed for project %s. Enable PITR for %s to resolve failed check",
                        identifier,
                        identifier,
                        extra={"fields": fields},
                    )
            else:
                self.logger.error(
                    "Failed to retrieve PITR status for project %s: %s",
                    identifier,
                    outcome.error,
                    extra={"fields": fields},
                )
                item = ProjectPITRItem(
                    identifier=identifier, enabled=None, error=LOOKUP_ERROR, project=ref
                )
            items.append(item)

        return ComplianceResultSet(kind=self.kind, items=items)

    async def _lookup(self, ref: ProjectRef) -> bool:
        config: dict[str, Any] = await self.provider.get_backup_config(ref.project_id)
        return bool(config.get("pitr_enabled", False))
