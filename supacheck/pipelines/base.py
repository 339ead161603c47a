"""Concurrent per-item lookups with isolated failures."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Iterable, TypeVar

from supacheck.models import CheckKind, ComplianceResultSet

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class LookupOutcome(Generic[T, R]):
    """Settled result of one lookup: either ``value`` or ``error`` is set."""

    entity: T
    value: R | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _settle(entity: T, lookup: Callable[[T], Awaitable[R]]) -> LookupOutcome[T, R]:
    try:
        return LookupOutcome(entity=entity, value=await lookup(entity))
    except Exception as e:
        return LookupOutcome(entity=entity, error=e)


async def fan_out(
    entities: Iterable[T],
    lookup: Callable[[T], Awaitable[R]],
) -> list[LookupOutcome[T, R]]:
    """Run ``lookup`` for every entity concurrently and wait for all of them.

    One task is scheduled per entity. A failing lookup is captured in its own
    outcome and never cancels siblings. Outcomes come back in input order.
    Cancelling the caller does not cancel lookups already in flight.
    """
    tasks = [asyncio.ensure_future(_settle(entity, lookup)) for entity in entities]
    if not tasks:
        return []
    return list(await asyncio.shield(asyncio.gather(*tasks)))


class Pipeline(ABC):
    """One tenant-wide compliance check producing a fresh result set."""

    kind: CheckKind

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    async def run(self) -> ComplianceResultSet:
        """Collect and normalize verdicts for every item of this kind."""
