"""Protocol module for the memcache client."""

from .commands import (
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
from .transport import RawMemcache

__all__ = [
    "GetOperation",
    "GetResult",
    "IncrementDirection",
    "IncrementOperation",
    "IncrementResult",
    "RawMemcache",
    "RemoveOperation",
    "RemoveResult",
    "SetMode",
    "SetOperation",
    "SetResult",
    "Status",
]
