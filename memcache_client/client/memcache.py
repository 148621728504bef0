"""
Memcache Client Facade

Memcache is the public surface of the client. It normalizes keys and
values, sends one batch per call to a RawMemcache transport and reduces the
answer to a plain return value or an exception.

CasMemcache shares the transport of the facade it was derived from and adds
optimistic concurrency: every token observed on a read is remembered, and
the next unconditional set() of that key only succeeds if the item is still
unchanged on the service.

Usage:
    memcache = Memcache(transport)
    await memcache.set("greeting", "hello", expiration=timedelta(hours=1))
    await memcache.get("greeting")            # 'hello'
    await memcache.get("greeting", as_binary=True)  # b'hello'

    cas = memcache.with_cas()
    value = await cas.get("counter")
    await cas.set("counter", "2")  # ModifiedError if changed since get()
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Hashable, Iterable, Optional, Union

from ..cas.registry import CasRegistry
from ..protocol.commands import SetMode
from ..protocol.transport import RawMemcache
from .codec import KeyInput, normalize_key, normalize_keys, result_key
from .operations import Expiration, OperationTranslator
from .responses import reduce_get, reduce_increment, reduce_remove, reduce_set

logger = logging.getLogger(__name__)


class Memcache:
    """
    Client for a key-value cache service.

    Keys and values may be given as text or as byte sequences. Text is
    encoded with the configured encoding; values are decoded back to text on
    read unless as_binary is requested.

    Attributes:
        transport: The RawMemcache every call is sent through
        cas_enabled: Whether reads are tracked for CAS writes
    """

    cas_enabled = False

    def __init__(
            self,
            transport: RawMemcache,
            encoding: Optional[str] = None,
            max_expiration: Optional[int] = None,
    ):
        """
        Initialize the client.

        Args:
            transport: Batched transport to the service (shared, not owned)
            encoding: Codec for text keys and values (default from settings)
            max_expiration: Largest accepted expiration in seconds
                (default settings.MAX_EXPIRATION, 30 days)
        """
        self._transport = transport
        self._encoding = encoding
        self._translator = OperationTranslator(
            encoding=encoding, max_expiration=max_expiration
        )

    @property
    def transport(self) -> RawMemcache:
        return self._transport

    def _lookup_token(self, key: bytes) -> Optional[int]:
        return None

    def _record_token(self, key: bytes, token: int) -> None:
        pass

    async def get(self, key: KeyInput, as_binary: bool = False) -> Union[str, bytes, None]:
        """
        Get the value stored for key.

        Args:
            key: Text or byte sequence
            as_binary: Return raw bytes instead of decoded text

        Returns:
            The value, or None if the key does not exist

        Raises:
            InvalidArgumentError: If key is not text or a byte sequence
            ServiceError: If the service reports any other failure
            InternalError: If the transport breaks the batch contract
            UnicodeDecodeError: If the value is not valid text in the
                configured encoding; use as_binary=True to read raw bytes
        """
        batch = self._translator.get_batch([normalize_key(key, self._encoding)])
        results = await self._transport.get(batch)
        return reduce_get(
            batch, results, as_binary, self._encoding, self._record_token
        )[0]

    async def get_all(self, keys: Iterable[KeyInput], as_binary: bool = False) -> Dict[Hashable, Any]:
        """
        Get the values stored for several keys in one round-trip.

        Returns:
            Dict from each requested key to its value (None if missing).
            Mutable byte-sequence keys are returned as bytes.

        Raises:
            ServiceError: On the first key the service fails to read; no
                partial result is returned
            UnicodeDecodeError: If a value is not valid text and as_binary
                is not set
        """
        caller_keys, encoded_keys = normalize_keys(keys, self._encoding)
        if not caller_keys:
            logger.debug("Skipping empty get batch")
            return {}

        batch = self._translator.get_batch(encoded_keys)
        logger.debug(f"Sending get batch of {len(batch)}")
        results = await self._transport.get(batch)
        values = reduce_get(batch, results, as_binary, self._encoding, self._record_token)
        return {
            result_key(key, encoded): value
            for key, encoded, value in zip(caller_keys, encoded_keys, values)
        }

    async def set(
            self,
            key: KeyInput,
            value: KeyInput,
            mode: Union[SetMode, str] = SetMode.SET,
            expiration: Expiration = None,
    ) -> None:
        """
        Store value under key.

        Args:
            key: Text or byte sequence
            value: Text or byte sequence
            mode: SET stores unconditionally, ADD only if the key is absent,
                REPLACE only if it is present
            expiration: timedelta or seconds, at most 30 days (None = never)

        Raises:
            InvalidArgumentError: Bad key, value, mode or expiration
            NotStoredError: The ADD/REPLACE precondition failed
            ModifiedError: The item changed since its CAS token was read
            ServiceError: Any other failure reported by the service
        """
        batch = self._translator.set_batch(
            [(key, value)], mode, expiration, self._lookup_token
        )
        results = await self._transport.set(batch)
        reduce_set(batch, results)

    async def set_all(
            self,
            items: Union[Mapping, Iterable],
            mode: Union[SetMode, str] = SetMode.SET,
            expiration: Expiration = None,
    ) -> None:
        """
        Store several items in one round-trip.

        Args:
            items: Mapping from key to value, or an iterable of (key, value)
                pairs (needed for unhashable keys such as lists)
            mode: Applied to every item
            expiration: Applied to every item

        Raises:
            The same errors as set(), for the first failing item
        """
        pairs = items.items() if isinstance(items, Mapping) else items
        batch = self._translator.set_batch(pairs, mode, expiration, self._lookup_token)
        if not batch:
            logger.debug("Skipping empty set batch")
            return

        logger.debug(f"Sending set batch of {len(batch)}")
        results = await self._transport.set(batch)
        reduce_set(batch, results)

    async def remove(self, key: KeyInput) -> None:
        """Remove key. Succeeds whether or not the key existed."""
        batch = self._translator.remove_batch([normalize_key(key, self._encoding)])
        results = await self._transport.remove(batch)
        reduce_remove(batch, results)

    async def remove_all(self, keys: Iterable[KeyInput]) -> None:
        """Remove several keys in one round-trip. Missing keys are ignored."""
        _, encoded_keys = normalize_keys(keys, self._encoding)
        if not encoded_keys:
            logger.debug("Skipping empty remove batch")
            return

        batch = self._translator.remove_batch(encoded_keys)
        logger.debug(f"Sending remove batch of {len(batch)}")
        results = await self._transport.remove(batch)
        reduce_remove(batch, results)

    async def increment(self, key: KeyInput, delta: int = 1, initial_value: int = 0) -> int:
        """
        Add delta to the counter stored under key.

        Args:
            key: Text or byte sequence
            delta: Amount to add; a negative delta decrements
            initial_value: Stored (and returned) if the key does not exist

        Returns:
            The counter value after the update

        Raises:
            InvalidArgumentError: If delta or initial_value is not an int
            ServiceError: If the service cannot update the counter
        """
        batch = self._translator.increment_batch(key, delta, initial_value)
        results = await self._transport.increment(batch)
        return reduce_increment(batch, results)

    async def decrement(self, key: KeyInput, delta: int = 1, initial_value: int = 0) -> int:
        """Subtract delta from the counter stored under key. See increment()."""
        self._translator.check_delta(delta)
        return await self.increment(key, delta=-delta, initial_value=initial_value)

    async def clear(self) -> None:
        """Remove every item from the service."""
        await self._transport.clear()

    def with_cas(self) -> "CasMemcache":
        """
        Create a CAS-tracking client on the same transport.

        Each call returns a client with its own, empty token registry.
        """
        return CasMemcache(
            self._transport,
            encoding=self._encoding,
            max_expiration=self._translator.max_expiration,
        )


class CasMemcache(Memcache):
    """
    Memcache client that tracks CAS tokens.

    Tokens returned by get() and get_all() are recorded per key. A later
    set() or set_all() in SET mode sends the recorded token, so the write
    fails with ModifiedError if another client changed the item in between.
    ADD and REPLACE never send a token. All other calls behave exactly as on
    Memcache.
    """

    cas_enabled = True

    def __init__(
            self,
            transport: RawMemcache,
            encoding: Optional[str] = None,
            max_expiration: Optional[int] = None,
    ):
        super().__init__(transport, encoding=encoding, max_expiration=max_expiration)
        self._registry = CasRegistry()

    @property
    def registry(self) -> CasRegistry:
        return self._registry

    def _lookup_token(self, key: bytes) -> Optional[int]:
        token = self._registry.lookup(key)
        if token is not None:
            logger.debug(f"Attaching CAS token {token:#x} to set of {key!r}")
        return token

    def _record_token(self, key: bytes, token: int) -> None:
        self._registry.record(key, token)
