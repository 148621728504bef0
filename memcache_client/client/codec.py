"""
Key and Value Codec

Keys and values are accepted either as text or as a byte sequence and are
normalized to immutable bytes before anything else happens to them. The
caller's containers are copied, never kept or modified.
"""

from typing import Hashable, List, Optional, Sequence, Tuple, Union

from ..config.settings import settings
from ..errors import InvalidArgumentError

# Text, or any byte sequence: bytes, bytearray, memoryview, list/tuple of ints
KeyInput = Union[str, bytes, bytearray, memoryview, Sequence[int]]


def normalize(data: KeyInput, what: str = "Key", encoding: Optional[str] = None) -> bytes:
    """
    Normalize a key or value to bytes.

    Args:
        data: Text or byte sequence supplied by the caller
        what: Name used in the error message ("Key" or "Value")
        encoding: Codec for text input (default settings.ENCODING)

    Returns:
        A new immutable bytes object

    Raises:
        InvalidArgumentError: If data is not text or a byte sequence

    Examples:
        >>> normalize("A")
        b'A'
        >>> normalize([65, 66])
        b'AB'
    """
    if isinstance(data, str):
        return data.encode(encoding or settings.ENCODING)
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, (list, tuple)):
        try:
            return bytes(data)
        except (TypeError, ValueError):
            raise InvalidArgumentError(
                f"{what} sequence must contain only integers in range(256)"
            ) from None
    raise InvalidArgumentError(
        f"{what} must have type str or a byte sequence, not {type(data).__name__}"
    )


def normalize_key(key: KeyInput, encoding: Optional[str] = None) -> bytes:
    return normalize(key, "Key", encoding)


def normalize_value(value: KeyInput, encoding: Optional[str] = None) -> bytes:
    return normalize(value, "Value", encoding)


def normalize_keys(keys, encoding: Optional[str] = None) -> Tuple[List[KeyInput], List[bytes]]:
    """
    Snapshot an iterable of keys and encode each of them.

    Returns:
        (caller_keys, encoded_keys), both in iteration order
    """
    caller_keys = list(keys)
    return caller_keys, [normalize_key(key, encoding) for key in caller_keys]


def result_key(key: KeyInput, encoded: bytes) -> Hashable:
    """
    Choose the dict key under which a get_all result is returned.

    Hashable inputs (str, bytes, tuples) are returned as given; mutable byte
    sequences are replaced by their encoded bytes.
    """
    if isinstance(key, (str, bytes, tuple)):
        return key
    return encoded


def decode_value(data: bytes, as_binary: bool = False, encoding: Optional[str] = None) -> Union[bytes, str]:
    """Return data unchanged when as_binary is set, otherwise decoded text."""
    if as_binary:
        return data
    return data.decode(encoding or settings.ENCODING)
