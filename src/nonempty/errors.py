"""
nonempty - Exceptions

Every exception raised by the package derives from NonEmptyError, and each one
also derives from the builtin exception a plain Python container would raise
in the same situation, so existing ``except ValueError`` style handlers keep
working.

Rejections that are part of normal control flow are NOT exceptions:
checked mutators (try_pop, try_remove, drain, ...) return None when the
operation would leave the collection empty.
"""

from typing import Any


class NonEmptyError(Exception):
    """Base class for all nonempty errors."""


class EmptyInputError(NonEmptyError, ValueError):
    """
    Raised when a fallible conversion is given an empty collection.

    The rejected input is attached unchanged as ``original``; nothing was
    copied or consumed, so callers can keep using it.
    """

    def __init__(self, original: Any, target: str = "non-empty collection"):
        self.original = original
        self.target = target
        super().__init__(
            f"Cannot build {target} from an empty {type(original).__name__}"
        )


class PreconditionViolatedError(NonEmptyError, AssertionError):
    """
    A documented precondition of an unchecked entry point was broken.

    This is a programmer error. It is only raised by positive-size
    initializers and, when debug checks are enabled, by unchecked operations.
    """


class StaleViewError(NonEmptyError, RuntimeError):
    """A NonEmptySlice was used after its owner was structurally mutated."""


class MovedValueError(NonEmptyError, RuntimeError):
    """An owned collection was used after its storage was moved out."""


class CollectionAllocError(NonEmptyError, MemoryError):
    """The backing store could not provide the requested capacity."""

    def __init__(self, message: str, requested: int = 0):
        self.requested = requested
        super().__init__(message)


class CapacityOverflowError(CollectionAllocError, OverflowError):
    """The requested capacity exceeds what a Python sequence can address."""
