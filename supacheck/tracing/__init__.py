"""Tracing and logging for Supacheck pipelines."""

from .logger import EvidenceLogger, JSONLineFormatter, setup_logging

__all__ = [
    "EvidenceLogger",
    "JSONLineFormatter",
    "setup_logging",
]
