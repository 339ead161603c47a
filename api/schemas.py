"""Pydantic schemas for API response models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ComplianceStatusEnum(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    UNKNOWN = "unknown"


class SummarySchema(BaseModel):
    """Counts of verdicts in one result set."""

    total: int
    passed: int
    failed: int
    unknown: int


class ComplianceItemSchema(BaseModel):
    """Fields shared by every compliance verdict."""

    identifier: str
    enabled: bool | None
    status: ComplianceStatusEnum
    error: str | None = None


class MFAFactorSchema(BaseModel):
    factorId: str
    factorType: str
    createdAt: str | None = None
    updatedAt: str | None = None
    lastChallengedAt: str | None = None


class UserMFAStatusSchema(ComplianceItemSchema):
    id: str
    email: str | None = None
    factors: list[MFAFactorSchema] = Field(default_factory=list)


class TableRLSStatusSchema(ComplianceItemSchema):
    table_name: str


class ProjectPITRStatusSchema(ComplianceItemSchema):
    projectId: str | None = None
    projectName: str | None = None


class UsersResponse(BaseModel):
    users: list[UserMFAStatusSchema]
    summary: SummarySchema


class TablesResponse(BaseModel):
    tables: list[TableRLSStatusSchema]
    summary: SummarySchema


class ProjectsResponse(BaseModel):
    projects: list[ProjectPITRStatusSchema]
    summary: SummarySchema


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    checks: dict[str, bool]
