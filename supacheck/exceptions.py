"""Exceptions raised by Supacheck providers and pipelines."""

from __future__ import annotations


class SupacheckError(Exception):
    """Base exception for all Supacheck errors."""


class ConfigurationError(SupacheckError):
    """Raised when required credentials or endpoints are not configured."""


class UpstreamError(SupacheckError):
    """An upstream API call failed."""

    source = "upstream"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.source} HTTP {self.status_code}: {self.message}"
        return f"{self.source}: {self.message}"


class IdentityAPIError(UpstreamError):
    """Supabase Auth admin API call failed."""

    source = "auth"


class DatabaseAPIError(UpstreamError):
    """PostgREST RPC call failed."""

    source = "database"


class ManagementAPIError(UpstreamError):
    """Supabase Management API call failed."""

    source = "management"


class PipelineError(SupacheckError):
    """A compliance pipeline failed as a whole; no partial result exists."""

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message
