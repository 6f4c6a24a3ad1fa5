"""
Index, range and capacity helpers shared by the collections.

Functions:
- normalize_index(index, length) -> int
- normalize_insert_index(index, length) -> int
- resolve_range(rng, length) -> tuple[int, int]
- covers_all(start, stop, length) -> bool
- check_capacity(needed) -> Optional[CapacityOverflowError]
- amortized_capacity(current, needed) -> int
- require(condition, operation, detail)
"""

import struct
import sys
from typing import Optional, Tuple, Union

from .config import get_config
from .errors import CapacityOverflowError, PreconditionViolatedError
from .logger import log_precondition_violation

# Largest element count a list can hold (PY_SSIZE_T_MAX / sizeof(PyObject *))
MAX_CAPACITY = sys.maxsize // struct.calcsize("P")

RangeLike = Union[slice, range, None]


def normalize_index(index: int, length: int) -> int:
    """
    Map negative indices and validate bounds.

    Returns the non-negative index in [0, length).
    Raises IndexError if out of range.
    """
    if not isinstance(index, int) or isinstance(index, bool):
        raise TypeError(f"indices must be integers, not {type(index).__name__}")
    if index < 0:
        index += length
    if index < 0 or index >= length:
        raise IndexError("index out of range")
    return index


def normalize_insert_index(index: int, length: int) -> int:
    """Like normalize_index, but ``length`` itself is a valid position (append)."""
    if not isinstance(index, int) or isinstance(index, bool):
        raise TypeError(f"indices must be integers, not {type(index).__name__}")
    if index < 0:
        index += length
    if index < 0 or index > length:
        raise IndexError("insertion index out of range")
    return index


def resolve_range(rng: RangeLike, length: int) -> Tuple[int, int]:
    """
    Resolve a contiguous range against ``length``.

    Accepts ``None`` (everything), a ``slice`` or a ``range`` with step 1.
    Negative bounds count from the end. Unlike slicing a list, out-of-bounds
    or reversed ranges are rejected with IndexError instead of being clamped.

    Returns:
        (start, stop) with 0 <= start <= stop <= length
    """
    if rng is None:
        return 0, length

    if isinstance(rng, range):
        if rng.step != 1:
            raise ValueError("range step must be 1")
        start, stop = rng.start, rng.stop
    elif isinstance(rng, slice):
        if rng.step not in (None, 1):
            raise ValueError("slice step must be 1")
        start = 0 if rng.start is None else rng.start
        stop = length if rng.stop is None else rng.stop
    else:
        raise TypeError(f"expected a slice or range, got {type(rng).__name__}")

    if start < 0:
        start += length
    if stop < 0:
        stop += length

    if start < 0 or stop > length or start > stop:
        raise IndexError(f"range {start}..{stop} out of bounds for length {length}")

    return start, stop


def covers_all(start: int, stop: int, length: int) -> bool:
    """True when [start, stop) contains both the first and the last index."""
    return start == 0 and stop >= length and length > 0


def check_capacity(needed: int) -> Optional[CapacityOverflowError]:
    """Return the overflow error for ``needed`` slots, or None if it fits."""
    if needed > MAX_CAPACITY:
        return CapacityOverflowError(
            f"capacity overflow: {needed} exceeds {MAX_CAPACITY}", requested=needed
        )
    return None


def amortized_capacity(current: int, needed: int) -> int:
    """Capacity after growing to hold ``needed`` elements (doubling policy)."""
    if needed <= current:
        return current
    return min(max(current * 2, needed, 4), max(needed, MAX_CAPACITY))


def require(condition: bool, operation: str, detail: str) -> None:
    """
    Verify an unchecked-operation precondition when debug checks are enabled.

    With debug checks off this does nothing: unchecked entry points perform no
    validation.
    """
    if condition or not get_config().debug_checks:
        return
    log_precondition_violation(operation, detail)
    raise PreconditionViolatedError(f"{operation}: {detail}")
