"""
Batched Transport Contract

RawMemcache is the boundary between the client and whatever executes
operations against the cache service (a network protocol implementation,
an in-process store, a test double).

Contract:
    - Every batch method receives a non-empty list of same-kind operations.
    - It answers with a list of results of the same length, in request order.
    - Per-item failures are reported through the result status; a failure of
      the whole call (connection lost, timeout) is raised as an exception.
"""

from abc import ABC, abstractmethod
from typing import List

from .commands import (
    GetOperation,
    GetResult,
    IncrementOperation,
    IncrementResult,
    RemoveOperation,
    RemoveResult,
    SetOperation,
    SetResult,
)


class RawMemcache(ABC):
    """Abstract batched transport consumed by the client facade."""

    @abstractmethod
    async def get(self, batch: List[GetOperation]) -> List[GetResult]:
        """Fetch every key in batch."""

    @abstractmethod
    async def set(self, batch: List[SetOperation]) -> List[SetResult]:
        """Store every item in batch."""

    @abstractmethod
    async def remove(self, batch: List[RemoveOperation]) -> List[RemoveResult]:
        """Remove every key in batch."""

    @abstractmethod
    async def increment(self, batch: List[IncrementOperation]) -> List[IncrementResult]:
        """Apply every counter update in batch."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every item held by the service."""
