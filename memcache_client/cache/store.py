"""
In-Memory Transport Module

An in-process implementation of the RawMemcache batch contract, for local
development and integration tests. Items live in a plain dict; nothing is
evicted, replicated or persisted.

Semantics follow the memcached binary protocol:
- Every stored item carries a CAS token from a per-store counter; each
  mutation assigns a fresh one.
- SET with a token fails with KEY_NOT_FOUND if the item is gone and with
  KEY_EXISTS if the token is stale.
- ADD fails with NOT_STORED if the key exists, REPLACE if it does not.
- Counters are unsigned 64-bit decimal strings: increments wrap, decrements
  stop at zero.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..protocol.commands import (
    GetOperation,
    GetResult,
    IncrementDirection,
    IncrementOperation,
    IncrementResult,
    RemoveOperation,
    RemoveResult,
    SetMode,
    SetOperation,
    SetResult,
    Status,
)
from ..protocol.transport import RawMemcache

logger = logging.getLogger(__name__)

COUNTER_MODULUS = 2 ** 64


@dataclass
class _Item:
    value: bytes
    flags: int
    cas: int
    expires_at: float  # 0 means no expiration


class InMemoryMemcache(RawMemcache):
    """
    Dict-backed RawMemcache.

    Internal Storage:
        key bytes -> _Item(value, flags, cas, expires_at)
        Expired items are removed lazily on access or by cleanup_expired().
    """

    def __init__(self):
        self._items: Dict[bytes, _Item] = {}
        self._last_cas = 0

    def _next_cas(self) -> int:
        self._last_cas += 1
        return self._last_cas

    @staticmethod
    def _expires_at(expiration: int) -> float:
        return time.time() + expiration if expiration and expiration > 0 else 0

    def _live(self, key: bytes) -> Optional[_Item]:
        """Return the item for key, dropping it first if it has expired."""
        item = self._items.get(key)
        if item is None:
            return None
        if item.expires_at and item.expires_at <= time.time():
            self._items.pop(key, None)
            return None
        return item

    def _store(self, key: bytes, value: bytes, flags: int, expires_at: float) -> None:
        self._items[key] = _Item(value, flags, self._next_cas(), expires_at)

    async def get(self, batch: List[GetOperation]) -> List[GetResult]:
        logger.debug(f"get batch of {len(batch)}")
        results = []
        for operation in batch:
            item = self._live(operation.key)
            if item is None:
                results.append(GetResult.not_found())
            else:
                results.append(GetResult.found(item.value, cas=item.cas, flags=item.flags))
        return results

    async def set(self, batch: List[SetOperation]) -> List[SetResult]:
        logger.debug(f"set batch of {len(batch)}")
        return [self._set_one(operation) for operation in batch]

    def _set_one(self, operation: SetOperation) -> SetResult:
        item = self._live(operation.key)

        if operation.mode is SetMode.ADD and item is not None:
            return SetResult(Status.NOT_STORED, "key exists")
        if operation.mode is SetMode.REPLACE and item is None:
            return SetResult(Status.NOT_STORED, "key not found")
        if operation.cas:
            if item is None:
                return SetResult(Status.KEY_NOT_FOUND, "key not found")
            if item.cas != operation.cas:
                return SetResult(Status.KEY_EXISTS, "cas mismatch")

        self._store(
            operation.key,
            operation.value,
            operation.flags,
            self._expires_at(operation.expiration),
        )
        return SetResult.ok()

    async def remove(self, batch: List[RemoveOperation]) -> List[RemoveResult]:
        logger.debug(f"remove batch of {len(batch)}")
        results = []
        for operation in batch:
            if self._live(operation.key) is None:
                results.append(RemoveResult(Status.KEY_NOT_FOUND, "key not found"))
            else:
                self._items.pop(operation.key, None)
                results.append(RemoveResult.ok())
        return results

    async def increment(self, batch: List[IncrementOperation]) -> List[IncrementResult]:
        logger.debug(f"increment batch of {len(batch)}")
        return [self._increment_one(operation) for operation in batch]

    def _increment_one(self, operation: IncrementOperation) -> IncrementResult:
        item = self._live(operation.key)

        if item is None:
            value = operation.initial_value
            self._store(
                operation.key,
                str(value).encode(),
                0,
                self._expires_at(operation.expiration),
            )
            return IncrementResult.ok(value)

        if not item.value.isdigit():
            return IncrementResult(
                Status.NON_NUMERIC_VALUE,
                "cannot increment or decrement non-numeric value",
            )

        current = int(item.value)
        if operation.direction is IncrementDirection.UP:
            value = (current + operation.delta) % COUNTER_MODULUS
        else:
            value = max(current - operation.delta, 0)

        self._store(operation.key, str(value).encode(), item.flags, item.expires_at)
        return IncrementResult.ok(value)

    async def clear(self) -> None:
        logger.debug("clear")
        self._items.clear()

    def size(self) -> int:
        """
        Get the number of stored items.

        Note: This may include expired items that haven't been cleaned up yet.
        """
        return len(self._items)

    def cleanup_expired(self) -> int:
        """
        Remove all expired items.

        Returns:
            Number of items removed
        """
        now = time.time()
        expired = [k for k, item in self._items.items() if item.expires_at and item.expires_at <= now]
        for key in expired:
            self._items.pop(key, None)
        return len(expired)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the store.

        Returns:
            Dictionary containing total_keys, expired_keys, active_keys and
            last_cas (the most recently issued token)
        """
        now = time.time()
        total = len(self._items)
        expired = sum(1 for item in self._items.values() if 0 < item.expires_at <= now)

        return {
            "total_keys": total,
            "expired_keys": expired,
            "active_keys": total - expired,
            "last_cas": self._last_cas,
        }
