"""Domain models for Supacheck compliance status."""

from supacheck.models.compliance_item import (
    CheckKind,
    ComplianceItem,
    ComplianceResultSet,
    ComplianceStatus,
    IdentityMFAItem,
    MFAFactor,
    ProjectPITRItem,
    ProjectRef,
    TableRLSItem,
)

__all__ = [
    "CheckKind",
    "ComplianceItem",
    "ComplianceResultSet",
    "ComplianceStatus",
    "IdentityMFAItem",
    "MFAFactor",
    "ProjectPITRItem",
    "ProjectRef",
    "TableRLSItem",
]
