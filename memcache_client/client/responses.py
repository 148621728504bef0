"""
Response Reducer

Maps transport results back onto the caller's request and applies the
error taxonomy. Every reducer first checks that the transport answered
with exactly one result per operation; multi-item reducers stop at the
first failing item.
"""

import logging
from typing import Callable, List, Optional, Sequence, Union

from ..errors import InternalError, ModifiedError, NotStoredError, ServiceError
from ..protocol.commands import (
    GetOperation,
    GetResult,
    IncrementOperation,
    IncrementResult,
    RemoveOperation,
    RemoveResult,
    SetOperation,
    SetResult,
    Status,
)
from .codec import decode_value

logger = logging.getLogger(__name__)

TokenRecorder = Callable[[bytes, int], None]


def check_batch(kind: str, batch: Sequence, results: Sequence) -> None:
    """
    Raises:
        InternalError: If results and batch differ in length
    """
    if len(results) != len(batch):
        logger.warning(
            f"Transport answered {kind} batch of {len(batch)} with {len(results)} results"
        )
        raise InternalError(len(batch), len(results))


def reduce_get(
        batch: List[GetOperation],
        results: List[GetResult],
        as_binary: bool = False,
        encoding: Optional[str] = None,
        record: Optional[TokenRecorder] = None,
) -> List[Union[bytes, str, None]]:
    """
    Reduce a get batch to one value per key.

    Missing keys map to None. Tokens on successful results are passed to
    record, when given.

    Raises:
        ServiceError: On the first result with any other status
    """
    check_batch("get", batch, results)

    values = []
    for operation, result in zip(batch, results):
        if result.status == Status.KEY_NOT_FOUND:
            values.append(None)
        elif result.status == Status.NO_ERROR:
            if record is not None and result.cas is not None:
                record(operation.key, result.cas)
            values.append(decode_value(result.value or b"", as_binary, encoding))
        else:
            raise ServiceError(result.status, result.message or "Error getting item")
    return values


def reduce_set(batch: List[SetOperation], results: List[SetResult]) -> None:
    """
    Raises:
        NotStoredError: An ADD or REPLACE precondition failed
        ModifiedError: The CAS token no longer matched
        ServiceError: Any other failure status
    """
    check_batch("set", batch, results)

    for result in results:
        if result.status == Status.NO_ERROR:
            continue
        if result.status == Status.NOT_STORED:
            raise NotStoredError(result.message)
        if result.status == Status.KEY_EXISTS:
            raise ModifiedError(result.message)
        raise ServiceError(result.status, result.message or "Error storing item")


def reduce_remove(batch: List[RemoveOperation], results: List[RemoveResult]) -> None:
    """A missing key counts as removed."""
    check_batch("remove", batch, results)

    for result in results:
        if result.status not in (Status.NO_ERROR, Status.KEY_NOT_FOUND):
            raise ServiceError(result.status, result.message or "Error removing item")


def reduce_increment(batch: List[IncrementOperation], results: List[IncrementResult]) -> int:
    """Return the counter value after the update."""
    check_batch("increment", batch, results)

    result = results[0]
    if result.status != Status.NO_ERROR:
        raise ServiceError(result.status, result.message)
    return result.value
