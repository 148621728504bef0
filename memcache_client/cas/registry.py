"""
CAS Token Registry

Remembers, per key, the last CAS token observed on a read so that a later
unconditional write can be made conditional on the item being unchanged.

Entries are never evicted: the registry lives as long as the client that
owns it and grows with the number of distinct keys read through it. A stale
token can only make a write fail with ModifiedError, never overwrite a
newer item silently.

Concurrent record/lookup on the same key are serialized by a lock. Ordering
between concurrent reads of one key is not defined; the last read to call
record() wins.
"""

import logging
import threading
from typing import Any, Dict, Optional, Union

from .hashing import ByteKey

logger = logging.getLogger(__name__)

KeyLike = Union[bytes, ByteKey]


def _wrap(key: KeyLike) -> ByteKey:
    if isinstance(key, ByteKey):
        return key
    return ByteKey(key)


class CasRegistry:
    """
    Map from encoded key to the last CAS token seen for it.

    Usage:
        registry = CasRegistry()
        registry.record(b"user:1", 0xCA5)
        registry.lookup(b"user:1")  # 0xCA5
        registry.lookup(bytearray(b"user:1"))  # 0xCA5, same contents

    Time Complexity: O(len(key)) for record and lookup (hashing)
    """

    def __init__(self):
        self._tokens: Dict[ByteKey, int] = {}
        self._lock = threading.Lock()

    def record(self, key: KeyLike, token: int) -> None:
        """
        Insert or update the token for key.

        Args:
            key: Encoded key
            token: CAS token returned by the transport
        """
        entry = _wrap(key)
        with self._lock:
            self._tokens[entry] = token
        logger.debug(f"Recorded CAS token {token:#x} for {entry.data!r}")

    def lookup(self, key: KeyLike) -> Optional[int]:
        """
        Get the token last recorded for key.

        Returns:
            The token, or None if key was never read through this registry
        """
        entry = _wrap(key)
        with self._lock:
            return self._tokens.get(entry)

    def forget(self, key: KeyLike) -> bool:
        """
        Drop the token for key.

        Returns:
            True if a token was dropped, False if none was recorded
        """
        entry = _wrap(key)
        with self._lock:
            return self._tokens.pop(entry, None) is not None

    def clear(self) -> None:
        """Drop every recorded token."""
        with self._lock:
            self._tokens.clear()

    def __contains__(self, key: KeyLike) -> bool:
        return self.lookup(key) is not None

    def __len__(self) -> int:
        return len(self._tokens)

    def get_stats(self) -> Dict[str, Any]:
        """Get registry statistics."""
        with self._lock:
            sizes = [len(entry) for entry in self._tokens]
        return {
            "size": len(sizes),
            "key_bytes": sum(sizes),
        }
