"""Per-item compliance verdicts and the result sets that carry them."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CheckKind(str, Enum):
    """Compliance dimension checked by a pipeline."""

    MFA = "mfa"
    RLS = "rls"
    PITR = "pitr"


class ComplianceStatus(str, Enum):
    """Pass/fail view of a single verdict."""

    PASS = "pass"
    FAIL = "fail"
    UNKNOWN = "unknown"  # Lookup failed, no verdict produced


@dataclass
class ComplianceItem:
    """A single verdict for one user, table or project.

    ``enabled`` is ``None`` when the verdict could not be determined, in
    which case ``error`` describes why. ``False`` means the item was checked
    and is non-compliant.
    """

    identifier: str
    enabled: bool | None
    detail: Any = None
    error: str | None = None

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError("Compliance item identifier must not be empty")
        if (self.enabled is None) != (self.error is not None):
            raise ValueError(
                f"Item {self.identifier!r}: error must be set if and only if enabled is None"
            )

    @property
    def status(self) -> ComplianceStatus:
        if self.enabled is None:
            return ComplianceStatus.UNKNOWN
        return ComplianceStatus.PASS if self.enabled else ComplianceStatus.FAIL

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "identifier": self.identifier,
            "enabled": self.enabled,
            "status": self.status.value,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class MFAFactor:
    """A verified authentication factor enrolled by a user."""

    factor_id: str
    factor_type: str
    created_at: str | None = None
    updated_at: str | None = None
    last_challenged_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "MFAFactor":
        return cls(
            factor_id=str(row.get("id", "")),
            factor_type=str(row.get("factor_type", "")),
            created_at=_as_text(row.get("created_at")),
            updated_at=_as_text(row.get("updated_at")),
            last_challenged_at=_as_text(row.get("last_challenged_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "factorId": self.factor_id,
            "factorType": self.factor_type,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "lastChallengedAt": self.last_challenged_at,
        }


@dataclass
class IdentityMFAItem(ComplianceItem):
    """MFA verdict for one user; ``detail`` lists verified factors."""

    detail: list[MFAFactor] = field(default_factory=list)
    user_id: str = ""
    email: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "id": self.user_id,
                "email": self.email,
                "factors": [f.to_dict() for f in self.detail],
            }
        )
        return data


@dataclass
class TableRLSItem(ComplianceItem):
    """RLS verdict for one table."""

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["table_name"] = self.identifier
        return data


@dataclass
class ProjectRef:
    """Reference to a project visible to the management credentials."""

    project_id: str
    project_name: str


@dataclass
class ProjectPITRItem(ComplianceItem):
    """PITR verdict for one project."""

    project: ProjectRef | None = None

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.project is not None:
            data["projectId"] = self.project.project_id
            data["projectName"] = self.project.project_name
        return data


@dataclass
class ComplianceResultSet:
    """Ordered verdicts of one kind, produced by a single pipeline run."""

    kind: CheckKind
    items: list[ComplianceItem] = field(default_factory=list)

    def _count(self, status: ComplianceStatus) -> int:
        return sum(1 for item in self.items if item.status == status)

    @property
    def passed(self) -> int:
        return self._count(ComplianceStatus.PASS)

    @property
    def failed(self) -> int:
        return self._count(ComplianceStatus.FAIL)

    @property
    def unknown(self) -> int:
        return self._count(ComplianceStatus.UNKNOWN)

    @property
    def is_compliant(self) -> bool:
        """True when every item has a passing verdict."""
        return all(item.status == ComplianceStatus.PASS for item in self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "summary": {
                "total": len(self.items),
                "passed": self.passed,
                "failed": self.failed,
                "unknown": self.unknown,
            },
            "items": [item.to_dict() for item in self.items],
        }


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
