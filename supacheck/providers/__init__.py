"""Upstream API providers for Supacheck."""

from .database_provider import DatabaseProvider
from .identity_provider import IdentityProvider
from .management_provider import ManagementProvider

__all__ = [
    "DatabaseProvider",
    "IdentityProvider",
    "ManagementProvider",
]
