"""
Content Hashing for Byte Keys

Keys read through a CAS-enabled client are remembered by their byte
contents, not by the object that carried them. ByteKey wraps an encoded key
with value equality and a Jenkins one-at-a-time hash so two distinct
containers holding the same bytes land on the same registry entry.

See http://en.wikipedia.org/wiki/Jenkins_hash_function
"""

from typing import Iterable, Optional

MASK_32 = 0xFFFFFFFF


def one_at_a_time(data: Iterable[int]) -> int:
    """
    Compute the Jenkins one-at-a-time hash of a byte sequence.

    Args:
        data: Bytes, or any iterable of ints in range(256)

    Returns:
        Unsigned 32-bit hash

    Examples:
        >>> hex(one_at_a_time(b"a"))
        '0xca2e9442'
        >>> one_at_a_time(b"")
        0
    """
    h = 0
    for byte in data:
        h = (h + byte) & MASK_32
        h = (h + (h << 10)) & MASK_32
        h ^= h >> 6

    h = (h + (h << 3)) & MASK_32
    h ^= h >> 11
    h = (h + (h << 15)) & MASK_32
    return h


class ByteKey:
    """
    Immutable byte key with content equality.

    The hash is computed on first use and kept on the instance, so it lives
    exactly as long as the key itself.
    """

    __slots__ = ("data", "_hash")

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self._hash: Optional[int] = None

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = one_at_a_time(self.data)
        return self._hash

    def __eq__(self, other) -> bool:
        if isinstance(other, ByteKey):
            return self.data == other.data
        return NotImplemented

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return self.data

    def __repr__(self) -> str:
        return f"ByteKey({self.data!r})"
