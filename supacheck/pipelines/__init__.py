"""Compliance collection pipelines."""

from supacheck.pipelines.base import LookupOutcome, Pipeline, fan_out
from supacheck.pipelines.mfa import IdentityMFAPipeline
from supacheck.pipelines.pitr import ProjectPITRPipeline
from supacheck.pipelines.rls import TableRLSPipeline

__all__ = [
    "LookupOutcome",
    "Pipeline",
    "fan_out",
    "IdentityMFAPipeline",
    "ProjectPITRPipeline",
    "TableRLSPipeline",
]
