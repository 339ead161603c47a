"""Table-RLS pipeline: one aggregate query, no fan-out."""

from __future__ import annotations

import logging

from supacheck.exceptions import PipelineError, UpstreamError
from supacheck.models import CheckKind, ComplianceResultSet, TableRLSItem
from supacheck.pipelines.base import Pipeline
from supacheck.providers.database_provider import DatabaseProvider


class TableRLSPipeline(Pipeline):
    """Reports row-level security status for every table.

    The aggregate query is the failure unit: if it fails there is no
    per-table result to salvage, so the whole run fails.
    """

    kind = CheckKind.RLS

    def __init__(self, provider: DatabaseProvider, logger: logging.Logger | None = None):
        super().__init__(logger)
        self.provider = provider

    async def run(self) -> ComplianceResultSet:
        try:
            rows = await self.provider.get_rls_status()
        except UpstreamError as e:
            self.logger.error("Error fetching RLS status: %s", e)
            raise PipelineError(self.kind.value, "Failed to retrieve RLS status") from e

        items = []
        for row in rows:
            table_name = row.get("table_name")
            if not table_name:
                self.logger.warning("Skipping RLS row without table_name: %s", row)
                continue
            item = TableRLSItem(identifier=table_name, enabled=bool(row.get("rls_enabled")))
            if not item.enabled:
                self.logger.warning(
                    "RLS check failed for table %s. Enable RLS for %s to resolve failed check",
                    table_name,
                    table_name,
                    extra={"fields": {"check": self.kind.value, "table_name": table_name}},
                )
            items.append(item)

        return ComplianceResultSet(kind=self.kind, items=items)
