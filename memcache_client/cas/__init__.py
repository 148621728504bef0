"""CAS token tracking for the memcache client."""

from .hashing import ByteKey, one_at_a_time
from .registry import CasRegistry

__all__ = ["ByteKey", "CasRegistry", "one_at_a_time"]
