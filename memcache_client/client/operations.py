"""
Operation Translator

Turns high-level client calls into transport batches. Single-key calls
become one-element batches; multi-key calls keep the caller's iteration
order. All argument validation happens here, before anything is sent.
"""

import math
from datetime import timedelta
from typing import Callable, Iterable, List, Optional, Tuple, Union

from ..config.settings import settings
from ..errors import InvalidArgumentError
from ..protocol.commands import (
    GetOperation,
    IncrementDirection,
    IncrementOperation,
    RemoveOperation,
    SetMode,
    SetOperation,
)
from .codec import KeyInput, normalize_key, normalize_value

Expiration = Union[None, timedelta, int, float]
TokenLookup = Callable[[bytes], Optional[int]]


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class OperationTranslator:
    """
    Builds GetOperation, SetOperation, RemoveOperation and
    IncrementOperation batches.

    Attributes:
        encoding: Codec for text keys and values (None = settings.ENCODING)
        max_expiration: Largest accepted expiration, in seconds
    """

    def __init__(self, encoding: Optional[str] = None, max_expiration: Optional[int] = None):
        self.encoding = encoding
        self.max_expiration = (
            max_expiration if max_expiration is not None else settings.MAX_EXPIRATION
        )

    def check_expiration(self, expiration: Expiration) -> int:
        """
        Validate an expiration and convert it to whole seconds.

        Args:
            expiration: None (never expires), a timedelta, or seconds

        Returns:
            Expiration in whole seconds, 0 meaning no expiration. A positive
            fraction of a second is rounded up.

        Raises:
            InvalidArgumentError: If expiration is negative, not finite, of
                the wrong type, or exceeds max_expiration
        """
        if expiration is None:
            return 0
        if isinstance(expiration, timedelta):
            seconds = expiration.total_seconds()
        elif _is_int(expiration) or isinstance(expiration, float):
            seconds = expiration
        else:
            raise InvalidArgumentError(
                "Expiration must be a timedelta or a number of seconds"
            )

        if isinstance(seconds, float) and not math.isfinite(seconds):
            raise InvalidArgumentError("Expiration must be a finite number of seconds")
        if seconds < 0:
            raise InvalidArgumentError("Expiration cannot be negative")

        # Fractions round up so a short expiration never becomes 0 (never)
        seconds = math.ceil(seconds)
        if seconds > self.max_expiration:
            raise InvalidArgumentError(
                f"Expiration cannot exceed {timedelta(seconds=self.max_expiration)}"
            )
        return seconds

    @staticmethod
    def check_mode(mode: Union[SetMode, str]) -> SetMode:
        """Resolve mode to a SetMode, accepting its string value too."""
        if isinstance(mode, SetMode):
            return mode
        try:
            return SetMode(mode)
        except ValueError:
            raise InvalidArgumentError(f"Unsupported set mode {mode!r}") from None

    @staticmethod
    def check_pair(item) -> Tuple[KeyInput, KeyInput]:
        """Unpack a (key, value) pair; text and bytes are never split."""
        if not isinstance(item, (tuple, list)) or len(item) != 2:
            raise InvalidArgumentError(
                f"Items must be (key, value) pairs, not {item!r}"
            )
        return item[0], item[1]

    @staticmethod
    def check_delta(delta) -> int:
        if not _is_int(delta):
            raise InvalidArgumentError("Delta value must have type int")
        return delta

    def get_batch(self, keys: List[bytes]) -> List[GetOperation]:
        return [GetOperation(key) for key in keys]

    def set_batch(
            self,
            items: Iterable[Tuple[KeyInput, KeyInput]],
            mode: Union[SetMode, str] = SetMode.SET,
            expiration: Expiration = None,
            lookup: Optional[TokenLookup] = None,
    ) -> List[SetOperation]:
        """
        Build a set batch.

        Args:
            items: (key, value) pairs in the order they should be sent
            mode: SET, ADD or REPLACE
            expiration: See check_expiration()
            lookup: Returns the CAS token known for an encoded key; only
                consulted for SET mode

        Returns:
            One SetOperation per item. ADD and REPLACE never carry a token.
        """
        seconds = self.check_expiration(expiration)
        mode = self.check_mode(mode)

        try:
            pairs = iter(items)
        except TypeError:
            raise InvalidArgumentError(
                "Items must be a mapping or an iterable of (key, value) pairs"
            ) from None

        batch = []
        for item in pairs:
            key, value = self.check_pair(item)
            encoded_key = normalize_key(key, self.encoding)
            encoded_value = normalize_value(value, self.encoding)
            cas = None
            if mode is SetMode.SET and lookup is not None:
                cas = lookup(encoded_key)
            batch.append(
                SetOperation(
                    mode=mode,
                    key=encoded_key,
                    value=encoded_value,
                    expiration=seconds,
                    cas=cas,
                )
            )
        return batch

    def remove_batch(self, keys: List[bytes]) -> List[RemoveOperation]:
        return [RemoveOperation(key) for key in keys]

    def increment_batch(self, key: KeyInput, delta: int, initial_value: int = 0) -> List[IncrementOperation]:
        """
        Build a one-element counter batch.

        The direction follows the sign of delta; the operation always
        carries its magnitude.
        """
        self.check_delta(delta)
        if not _is_int(initial_value):
            raise InvalidArgumentError("Initial value must have type int")

        direction = IncrementDirection.UP if delta >= 0 else IncrementDirection.DOWN
        return [
            IncrementOperation(
                key=normalize_key(key, self.encoding),
                delta=abs(delta),
                direction=direction,
                initial_value=initial_value,
            )
        ]
