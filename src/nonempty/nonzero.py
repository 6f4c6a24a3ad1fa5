"""
nonempty - NonZero

An ``int`` that is known to be at least 1. Guarded operations accept a NonZero
where a zero argument would empty the collection (truncate, split_off,
swap_remove, resize, ...), and len()/capacity() return one so "index of the
last element" never needs an underflow check.
"""

from typing import Optional


class NonZero(int):
    """
    Positive integer proof token.

    Usage:
        n = NonZero(3)          # ok
        NonZero(0)              # ValueError
        NonZero.new(0)          # None
    """

    __slots__ = ()

    def __new__(cls, value: int) -> "NonZero":
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"NonZero requires an int, got {type(value).__name__}")
        if value < 1:
            raise ValueError(f"NonZero requires a value >= 1, got {value}")
        return super().__new__(cls, value)

    @classmethod
    def new(cls, value: int) -> Optional["NonZero"]:
        """Return a NonZero, or None when ``value`` is below 1."""
        if value < 1:
            return None
        return cls(value)

    @classmethod
    def new_unchecked(cls, value: int) -> "NonZero":
        """Build a NonZero without validation. The caller guarantees ``value >= 1``."""
        return int.__new__(cls, value)

    def get(self) -> int:
        """Return the value as a plain int."""
        return int(self)

    def __repr__(self) -> str:
        return f"NonZero({int(self)})"


def as_nonzero(value: int) -> NonZero:
    """Coerce a guarded-operation argument, rejecting 0 as a programmer error."""
    if isinstance(value, NonZero):
        return value
    return NonZero(value)
