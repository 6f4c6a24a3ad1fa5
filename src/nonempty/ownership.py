"""
Runtime ownership discipline for the owned collections.

Owners carry a ``_generation`` counter. Every structural mutation bumps it,
which invalidates outstanding NonEmptySlice views, and moving the storage out
bumps it one last time before the owner is marked as moved.
"""

import functools
from typing import Any, Callable, Generic, Iterator, List, TypeVar

from .errors import MovedValueError, StaleViewError
from .logger import log_ownership_error

T = TypeVar("T")


def structural(method: Callable) -> Callable:
    """Mark a method as a structural mutation of its owner."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        self._generation += 1
        return method(self, *args, **kwargs)

    return wrapper


def moved_error(owner: Any) -> MovedValueError:
    type_name = type(owner).__name__
    log_ownership_error("use after move", type_name)
    return MovedValueError(f"{type_name} was used after its storage was moved out")


def dedup_values(items: List[T], same_bucket: Callable[[T, T], bool]) -> List[T]:
    """
    Collapse runs of consecutive elements for which ``same_bucket`` holds.

    ``same_bucket(current, previous_kept)`` is called with the candidate first
    and the last retained element second. The first element is always kept, so
    a non-empty input gives a non-empty output.
    """
    if not items:
        return []
    kept = [items[0]]
    for item in items[1:]:
        if not same_bucket(item, kept[-1]):
            kept.append(item)
    return kept


class Drain(Generic[T]):
    """
    Lazy, single-pass removal of ``[start, stop)`` from an owned collection.

    Each step removes one element from the owner and yields it, so consuming
    the iterator fully removes exactly the requested range. Used as a context
    manager (or via close()), any elements not consumed are removed on exit.
    keep_rest() stops early and leaves them in place.

    Any other structural change to the owner while draining raises
    StaleViewError on the next step.
    """

    def __init__(self, owner: Any, remove_at: Callable[[int], T], start: int, stop: int):
        self._owner = owner
        self._remove_at = remove_at
        self._start = start
        self._remaining = stop - start
        self._expected = owner._generation

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self._remaining <= 0:
            raise StopIteration
        owner = self._owner
        if owner._generation != self._expected:
            log_ownership_error("stale drain", type(owner).__name__)
            raise StaleViewError(
                f"{type(owner).__name__} was modified while a drain was in progress"
            )
        item = self._remove_at(self._start)
        self._remaining -= 1
        owner._generation += 1
        self._expected = owner._generation
        return item

    def __len__(self) -> int:
        return max(self._remaining, 0)

    def close(self) -> None:
        """Remove every element not consumed yet."""
        for _ in self:
            pass

    def keep_rest(self) -> None:
        """Stop draining and keep the unconsumed elements in the owner."""
        self._remaining = 0

    def __enter__(self) -> "Drain[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None:
            self.close()
        return False

    def __repr__(self) -> str:
        return f"Drain(start={self._start}, remaining={len(self)})"
