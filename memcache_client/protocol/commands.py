"""
Protocol Operation and Result Definitions

This module defines the data structures exchanged with the transport.
Every transport call takes a batch (list) of same-kind operations and
answers with a list of results of the same length and order.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


class Status(IntEnum):
    """Per-item status codes reported by the transport."""
    NO_ERROR = 0x00
    KEY_NOT_FOUND = 0x01
    KEY_EXISTS = 0x02
    VALUE_TOO_LARGE = 0x03
    INVALID_ARGUMENTS = 0x04
    NOT_STORED = 0x05
    NON_NUMERIC_VALUE = 0x06
    UNKNOWN_COMMAND = 0x81
    OUT_OF_MEMORY = 0x82
    ERROR = 0xFF


class SetMode(Enum):
    """Store semantics for a set operation."""
    SET = "set"          # store unconditionally (or against a CAS token)
    ADD = "add"          # store only if the key does not exist
    REPLACE = "replace"  # store only if the key exists


class IncrementDirection(Enum):
    """Direction of a counter update."""
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class GetOperation:
    """Fetch the value and CAS token stored for key."""
    key: bytes


@dataclass(frozen=True)
class SetOperation:
    """
    Store value under key.

    Attributes:
        mode: SET, ADD or REPLACE
        key: Encoded key
        value: Encoded value
        expiration: Seconds until the item expires (0 = never)
        flags: Opaque flags stored alongside the value
        cas: Token the stored item must still carry, or None
    """
    mode: SetMode
    key: bytes
    value: bytes
    expiration: int = 0
    flags: int = 0
    cas: Optional[int] = None


@dataclass(frozen=True)
class RemoveOperation:
    """Remove the item stored under key."""
    key: bytes


@dataclass(frozen=True)
class IncrementOperation:
    """
    Update the counter stored under key.

    Attributes:
        key: Encoded key
        delta: Non-negative amount to move the counter by
        direction: UP or DOWN
        initial_value: Value stored when the key does not exist
        expiration: Seconds until a newly created counter expires
    """
    key: bytes
    delta: int
    direction: IncrementDirection
    initial_value: int = 0
    expiration: int = 0


@dataclass(frozen=True)
class GetResult:
    """Result of a GetOperation. value and cas are None unless NO_ERROR."""
    status: Status
    message: Optional[str] = None
    flags: int = 0
    cas: Optional[int] = None
    value: Optional[bytes] = None

    @classmethod
    def found(cls, value: bytes, cas: Optional[int] = None, flags: int = 0) -> "GetResult":
        """Create a successful get result."""
        return cls(status=Status.NO_ERROR, flags=flags, cas=cas, value=value)

    @classmethod
    def not_found(cls) -> "GetResult":
        """Create a 'key not found' get result."""
        return cls(status=Status.KEY_NOT_FOUND, message="key not found")


@dataclass(frozen=True)
class SetResult:
    """Result of a SetOperation."""
    status: Status
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> "SetResult":
        return cls(status=Status.NO_ERROR)


@dataclass(frozen=True)
class RemoveResult:
    """Result of a RemoveOperation."""
    status: Status
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> "RemoveResult":
        return cls(status=Status.NO_ERROR)


@dataclass(frozen=True)
class IncrementResult:
    """Result of an IncrementOperation; value is the counter after the update."""
    status: Status
    message: Optional[str] = None
    value: Optional[int] = None

    @classmethod
    def ok(cls, value: int) -> "IncrementResult":
        return cls(status=Status.NO_ERROR, value=value)
