"""
Memcache Client: CAS-aware access layer for a key-value cache service

Single- and batch-oriented get/set/remove/increment/clear operations on top
of an abstract batched transport, with optional optimistic concurrency
(CAS) tracking.
"""

from .cache.store import InMemoryMemcache
from .client.memcache import CasMemcache, Memcache
from .errors import (
    InternalError,
    InvalidArgumentError,
    MemcacheError,
    ModifiedError,
    NotStoredError,
    ServiceError,
)
from .protocol.commands import SetMode, Status
from .protocol.transport import RawMemcache

__version__ = "1.0.0"

__all__ = [
    "CasMemcache",
    "InMemoryMemcache",
    "InternalError",
    "InvalidArgumentError",
    "Memcache",
    "MemcacheError",
    "ModifiedError",
    "NotStoredError",
    "RawMemcache",
    "ServiceError",
    "SetMode",
    "Status",
]
