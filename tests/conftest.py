"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

from typing import Callable, Dict, List, Optional

import pytest

from memcache_client.cache.store import InMemoryMemcache
from memcache_client.client.memcache import CasMemcache, Memcache
from memcache_client.client.operations import OperationTranslator
from memcache_client.protocol.transport import RawMemcache


# ============================================================================
# Mock Transport
# ============================================================================

class MockTransport(RawMemcache):
    """
    Recording RawMemcache for facade tests.

    Each batch method delegates to a handler registered for its kind. A
    handler receives the batch and returns the result list (or raises).
    Every batch is recorded in `calls` as (kind, batch).

    Usage:
        transport.register("get", lambda batch: [GetResult.not_found()])
        assert await Memcache(transport).get("A") is None
        assert transport.calls == [("get", [GetOperation(b"A")])]
    """

    def __init__(self):
        self.handlers: Dict[str, Optional[Callable]] = {}
        self.calls: List[tuple] = []

    def register(self, kind: str, handler: Optional[Callable]) -> None:
        self.handlers[kind] = handler

    def batches(self, kind: str) -> List[list]:
        """Get every batch sent for kind, in call order."""
        return [batch for called, batch in self.calls if called == kind]

    async def _dispatch(self, kind: str, *args):
        self.calls.append((kind, args[0] if args else None))
        handler = self.handlers.get(kind)
        if handler is None:
            raise AssertionError(f"unexpected {kind} call")
        return handler(*args)

    async def get(self, batch):
        return await self._dispatch("get", batch)

    async def set(self, batch):
        return await self._dispatch("set", batch)

    async def remove(self, batch):
        return await self._dispatch("remove", batch)

    async def increment(self, batch):
        return await self._dispatch("increment", batch)

    async def clear(self):
        return await self._dispatch("clear")


# ============================================================================
# Transport Fixtures
# ============================================================================

@pytest.fixture
def transport() -> MockTransport:
    """Create a fresh MockTransport with no handlers registered."""
    return MockTransport()


@pytest.fixture
def memory() -> InMemoryMemcache:
    """Create an empty InMemoryMemcache."""
    return InMemoryMemcache()


# ============================================================================
# Client Fixtures
# ============================================================================

@pytest.fixture
def memcache(transport: MockTransport) -> Memcache:
    """Create a plain client on the mock transport."""
    return Memcache(transport)


@pytest.fixture
def cas_memcache(memcache: Memcache) -> CasMemcache:
    """Create a CAS-tracking client on the mock transport."""
    return memcache.with_cas()


@pytest.fixture
def translator() -> OperationTranslator:
    """Create an OperationTranslator with default settings."""
    return OperationTranslator()


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
