"""
Memcache Client Errors

Two tiers of errors are raised by the client:

- Caller misuse (InvalidArgumentError) is raised before any request is
  sent to the transport.
- Operation failures (ServiceError and its subclasses, InternalError) are
  raised after the transport has answered.

Exceptions raised by the transport itself are never wrapped.
"""

from typing import Optional

from .protocol.commands import Status


class MemcacheError(Exception):
    """Base class for all errors raised by the memcache client."""


class InvalidArgumentError(MemcacheError, ValueError):
    """Raised when a caller passes an argument the client cannot send."""


class ServiceError(MemcacheError):
    """
    Raised when the service reports a non-success status for an item.

    Attributes:
        status: The Status reported by the transport
        message: The message reported by the transport (may be empty)
    """

    def __init__(self, status: Status, message: Optional[str] = None):
        self.status = status
        self.message = message or ""
        name = getattr(status, "name", str(status))
        detail = f": {self.message}" if self.message else ""
        super().__init__(f"{name}{detail}")


class NotStoredError(ServiceError):
    """The ADD or REPLACE precondition failed; the item was not stored."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(Status.NOT_STORED, message or "item not stored")


class ModifiedError(ServiceError):
    """The item was modified since its CAS token was observed."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(Status.KEY_EXISTS, message or "item modified")


class InternalError(MemcacheError):
    """
    The transport broke its batch contract.

    Attributes:
        expected: Number of operations in the request
        received: Number of results in the response
    """

    def __init__(self, expected: int, received: int):
        self.expected = expected
        self.received = received
        super().__init__(
            f"transport returned {received} results for {expected} operations"
        )
