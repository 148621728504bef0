"""
Tests for the CAS-tracking client

These tests verify the CasMemcache class:
- Tokens observed by get() / get_all() are sent with later SET writes
- ADD and REPLACE never carry a token
- A stale token surfaces as ModifiedError
- Each CAS client owns an independent registry

Run with: python -m pytest tests/test_cas.py -v
"""

import pytest

from memcache_client.client.memcache import CasMemcache
from memcache_client.errors import ModifiedError, ServiceError
from memcache_client.protocol.commands import (
    GetResult,
    RemoveResult,
    SetMode,
    SetResult,
    Status,
)

CAS = 0xCA5
CAS_A = 0xCA5
CAS_B = 0xCA2


@pytest.fixture
def primed(cas_memcache: CasMemcache, transport) -> CasMemcache:
    """CAS client whose transport answers get with value b'B' and token CAS."""
    transport.register("get", lambda batch: [GetResult.found(b"B", cas=CAS)] * len(batch))
    transport.register("set", lambda batch: [SetResult.ok()] * len(batch))
    return cas_memcache


@pytest.mark.asyncio
class TestCasGetSet:
    """Test single-key CAS tracking."""

    async def test_get_then_set_sends_token(self, primed: CasMemcache, transport):
        assert await primed.get([65]) == "B"

        await primed.set([65], [66])
        await primed.set("A", [66])

        for (operation,) in transport.batches("set"):
            assert operation.mode is SetMode.SET
            assert operation.key == b"A"
            assert operation.value == b"B"
            assert operation.cas == CAS
            assert operation.expiration == 0

    async def test_set_without_get_has_no_token(self, primed: CasMemcache, transport):
        await primed.set("A", "B")
        assert transport.batches("set")[0][0].cas is None

    async def test_token_is_per_key(self, primed: CasMemcache, transport):
        await primed.get("A")
        await primed.set("Z", "B")
        assert transport.batches("set")[0][0].cas is None

    async def test_modified(self, primed: CasMemcache, transport):
        await primed.get([65])
        transport.register("set", lambda batch: [SetResult(Status.KEY_EXISTS)])

        with pytest.raises(ModifiedError):
            await primed.set([65], [66])
        with pytest.raises(ModifiedError):
            await primed.set("A", [66])

        assert [op.cas for (op,) in transport.batches("set")] == [CAS, CAS]

    @pytest.mark.parametrize("mode", [SetMode.ADD, SetMode.REPLACE])
    async def test_add_replace_have_no_token(self, primed: CasMemcache, transport, mode):
        await primed.get([65])
        await primed.set([65], [66], mode=mode)

        (operation,) = transport.batches("set")[0]
        assert operation.mode is mode
        assert operation.cas is None

    async def test_newer_read_replaces_token(self, primed: CasMemcache, transport):
        await primed.get("A")
        transport.register("get", lambda batch: [GetResult.found(b"C", cas=CAS + 1)])
        await primed.get("A")

        await primed.set("A", "D")
        assert transport.batches("set")[0][0].cas == CAS + 1

    async def test_not_found_records_nothing(self, cas_memcache: CasMemcache, transport):
        transport.register("get", lambda batch: [GetResult.not_found()])

        assert await cas_memcache.get("A") is None
        assert len(cas_memcache.registry) == 0

    async def test_error_status_records_nothing(self, cas_memcache: CasMemcache, transport):
        transport.register("get", lambda batch: [GetResult(Status.ERROR, cas=CAS)])

        with pytest.raises(ServiceError):
            await cas_memcache.get("A")
        assert len(cas_memcache.registry) == 0

    async def test_other_calls_unchanged(self, primed: CasMemcache, transport):
        transport.register("remove", lambda batch: [RemoveResult.ok()])
        await primed.get("A")

        await primed.remove("A")

        assert transport.batches("remove")[0][0].key == b"A"
        assert primed.registry.lookup(b"A") == CAS


@pytest.mark.asyncio
class TestCasGetAllSetAll:
    """Test multi-key CAS tracking."""

    @pytest.fixture
    def primed_all(self, cas_memcache: CasMemcache, transport) -> CasMemcache:
        transport.register(
            "get",
            lambda batch: [
                GetResult.found(b"C", cas=CAS_A),
                GetResult.found(b"D", cas=CAS_B),
            ],
        )
        transport.register("set", lambda batch: [SetResult.ok()] * len(batch))
        return cas_memcache

    async def test_get_all_set_all(self, primed_all: CasMemcache, transport):
        values = await primed_all.get_all([[65], "B"])
        assert values == {b"A": "C", "B": "D"}

        await primed_all.set_all([([65], "C"), ("B", [68])])

        batch = transport.batches("set")[0]
        assert [op.key for op in batch] == [b"A", b"B"]
        assert [op.value for op in batch] == [b"C", b"D"]
        assert [op.cas for op in batch] == [CAS_A, CAS_B]

    async def test_get_all_set_all_modified(self, primed_all: CasMemcache, transport):
        await primed_all.get_all([[65], "B"])
        transport.register(
            "set", lambda batch: [SetResult.ok(), SetResult(Status.KEY_EXISTS)]
        )

        with pytest.raises(ModifiedError):
            await primed_all.set_all({(65,): "C", "B": [68]})

    @pytest.mark.parametrize("mode", [SetMode.ADD, SetMode.REPLACE])
    async def test_add_replace_all_have_no_token(self, primed_all: CasMemcache, transport, mode):
        await primed_all.get_all([[65], "B"])

        await primed_all.set_all({(65,): "C", "B": [68]}, mode=mode)

        batch = transport.batches("set")[0]
        assert all(op.mode is mode for op in batch)
        assert all(op.cas is None for op in batch)

    async def test_get_all_token_used_by_single_set(self, primed_all: CasMemcache, transport):
        await primed_all.get_all(["A", "B"])

        await primed_all.set(bytearray(b"B"), "x")

        assert transport.batches("set")[0][0].cas == CAS_B


@pytest.mark.asyncio
class TestRegistryOwnership:
    """Each CAS client has its own registry."""

    async def test_parent_unaffected(self, memcache, transport):
        transport.register("get", lambda batch: [GetResult.found(b"B", cas=CAS)])
        transport.register("set", lambda batch: [SetResult.ok()])
        cas = memcache.with_cas()

        await cas.get("A")
        await memcache.set("A", "B")

        assert transport.batches("set")[0][0].cas is None

    async def test_siblings_independent(self, memcache, transport):
        transport.register("get", lambda batch: [GetResult.found(b"B", cas=CAS)])
        transport.register("set", lambda batch: [SetResult.ok()])
        first = memcache.with_cas()
        second = memcache.with_cas()

        await first.get("A")
        await second.set("A", "B")

        assert first.registry is not second.registry
        assert transport.batches("set")[0][0].cas is None

    async def test_with_cas_on_cas_client_is_fresh(self, primed: CasMemcache, transport):
        await primed.get("A")
        again = primed.with_cas()

        assert isinstance(again, CasMemcache)
        assert again.transport is primed.transport
        assert len(again.registry) == 0
        assert len(primed.registry) == 1
