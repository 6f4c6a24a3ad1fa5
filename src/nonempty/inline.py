"""
nonempty - InlineVec

Inline-capacity growable array, the backing store of NonEmptySmallVec.

Implementation notes
--------------------
* Up to ``inline_size`` elements live in a fixed ctypes array of ``py_object``.
* Once the count exceeds the inline size the elements "spill" into a heap
  ``list`` and stay there until shrink_to_fit()/grow() moves them back.
* Capacity is ``inline_size`` while inline, and the tracked heap capacity
  (grown to the next power of two) once spilled.
* An InlineVec may be empty. NonEmptySmallVec is what adds the invariant.
"""

import ctypes
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar

from .bounds import (
    MAX_CAPACITY,
    check_capacity,
    normalize_index,
    normalize_insert_index,
)
from .config import get_config
from .errors import CapacityOverflowError, CollectionAllocError
from .logger import log_spill
from .ownership import dedup_values

T = TypeVar("T")


def next_power_of_two(n: int) -> int:
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


class InlineVec(Generic[T]):
    """A list-like container that keeps small contents inline."""

    __slots__ = ("_inline_size", "_buf", "_len", "_heap", "_heap_cap")

    def __init__(self, inline_size: Optional[int] = None, items: Iterable[T] = ()):
        if inline_size is None:
            inline_size = get_config().inline_capacity
        if inline_size < 0:
            raise ValueError(f"inline_size must be >= 0, got {inline_size}")
        self._inline_size = inline_size
        self._buf = self._make_array(inline_size)
        self._len = 0
        self._heap: Optional[List[T]] = None
        self._heap_cap = 0
        self.extend(items)

    # ------------------------------- internals -------------------------------

    @staticmethod
    def _make_array(size: int):
        """Allocate a raw ctypes array of ``size`` py_object slots."""
        return (size * ctypes.py_object)()

    def _spill(self, items: List[T], capacity: int) -> None:
        """Move ``items`` to a heap list with room for ``capacity`` elements."""
        for i in range(self._len):
            self._buf[i] = None
        self._len = 0
        self._heap = items
        self._heap_cap = max(capacity, len(items))
        log_spill(self._inline_size, len(items), self._heap_cap, spilled=True)

    def _unspill(self) -> None:
        """Move heap contents back inline. The caller checked they fit."""
        items = self._heap
        self._heap = None
        self._heap_cap = 0
        for i, item in enumerate(items):
            self._buf[i] = item
        self._len = len(items)
        log_spill(self._inline_size, self._len, self._inline_size, spilled=False)

    def _items(self) -> List[T]:
        if self._heap is not None:
            return self._heap[:]
        return [self._buf[i] for i in range(self._len)]

    def _replace_all(self, items: List[T]) -> None:
        """Overwrite the contents, spilling if they no longer fit inline."""
        if self._heap is not None:
            self._heap[:] = items
            if len(items) > self._heap_cap:
                self._heap_cap = next_power_of_two(len(items))
            return
        if len(items) > self._inline_size:
            self._spill(list(items), next_power_of_two(len(items)))
            return
        for i, item in enumerate(items):
            self._buf[i] = item
        for i in range(len(items), self._len):
            self._buf[i] = None
        self._len = len(items)

    # ------------------------------ construction ------------------------------

    @classmethod
    def from_buf(cls, buf: Sequence[T]) -> "InlineVec[T]":
        """Fill an inline buffer sized exactly ``len(buf)``."""
        vec = cls(len(buf))
        for i, item in enumerate(buf):
            vec._buf[i] = item
        vec._len = len(buf)
        return vec

    @classmethod
    def from_buf_and_len(cls, buf: Sequence[T], length: int) -> "InlineVec[T]":
        """Inline buffer sized ``len(buf)`` holding only its first ``length`` elements."""
        if length > len(buf):
            raise IndexError(f"length {length} exceeds buffer size {len(buf)}")
        vec = cls(len(buf))
        for i in range(length):
            vec._buf[i] = buf[i]
        vec._len = length
        return vec

    @classmethod
    def from_list(cls, items: List[T], inline_size: Optional[int] = None) -> "InlineVec[T]":
        """
        Adopt ``items``. Contents that fit are copied inline; otherwise the
        list itself becomes the heap storage (no copy).
        An adopted list must not be mutated by the caller afterwards.
        """
        vec = cls(inline_size)
        if len(items) > vec._inline_size:
            vec._heap = items
            vec._heap_cap = len(items)
        else:
            vec._replace_all(items)
        return vec

    @classmethod
    def from_elem(cls, elem: T, n: int, inline_size: Optional[int] = None) -> "InlineVec[T]":
        return cls.from_list([elem] * n, inline_size)

    # -------------------------------- queries ---------------------------------

    def __len__(self) -> int:
        if self._heap is not None:
            return len(self._heap)
        return self._len

    @property
    def inline_size(self) -> int:
        return self._inline_size

    def spilled(self) -> bool:
        """True once the contents live on the heap."""
        return self._heap is not None

    def capacity(self) -> int:
        if self._heap is not None:
            return self._heap_cap
        return self._inline_size

    def __getitem__(self, index: int) -> T:
        if isinstance(index, slice):
            return self._items()[index]
        index = normalize_index(index, len(self))
        if self._heap is not None:
            return self._heap[index]
        return self._buf[index]

    def __setitem__(self, index: int, value: T) -> None:
        index = normalize_index(index, len(self))
        if self._heap is not None:
            self._heap[index] = value
        else:
            self._buf[index] = value

    def __iter__(self) -> Iterator[T]:
        return iter(self._items())

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, InlineVec):
            return self._items() == other._items()
        if isinstance(other, (list, tuple)):
            return self._items() == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"InlineVec({self._items()!r}, inline_size={self._inline_size})"

    # ------------------------------- capacity ---------------------------------

    def try_grow(self, new_cap: int) -> Optional[CollectionAllocError]:
        """
        Re-allocate to hold exactly ``new_cap`` elements.

        A capacity that fits inline moves spilled contents back inline.
        Returns the allocation error instead of raising it.
        """
        length = len(self)
        if new_cap < length:
            raise ValueError(f"new_cap ({new_cap}) must be >= len ({length})")
        if new_cap <= self._inline_size:
            if self._heap is not None:
                self._unspill()
            return None
        error = check_capacity(new_cap)
        if error is not None:
            return error
        if self._heap is not None:
            self._heap_cap = new_cap
        else:
            self._spill(self._items(), new_cap)
        return None

    def grow(self, new_cap: int) -> None:
        error = self.try_grow(new_cap)
        if error is not None:
            raise error

    def try_reserve(self, additional: int) -> Optional[CollectionAllocError]:
        """Make room for ``additional`` more elements (rounded up to a power of two)."""
        length = len(self)
        if self.capacity() - length >= additional:
            return None
        needed = length + additional
        if needed > MAX_CAPACITY:
            return CapacityOverflowError(
                f"capacity overflow: {needed} exceeds {MAX_CAPACITY}", requested=needed
            )
        return self.try_grow(min(next_power_of_two(needed), MAX_CAPACITY))

    def try_reserve_exact(self, additional: int) -> Optional[CollectionAllocError]:
        length = len(self)
        if self.capacity() - length >= additional:
            return None
        return self.try_grow(length + additional)

    def reserve(self, additional: int) -> None:
        error = self.try_reserve(additional)
        if error is not None:
            raise error

    def reserve_exact(self, additional: int) -> None:
        error = self.try_reserve_exact(additional)
        if error is not None:
            raise error

    def shrink_to_fit(self) -> None:
        """Move back inline if the contents fit, otherwise trim the heap capacity."""
        if self._heap is None:
            return
        if len(self._heap) <= self._inline_size:
            self._unspill()
        else:
            self._heap_cap = len(self._heap)

    # ------------------------------- mutation ---------------------------------

    def push(self, value: T) -> None:
        if self._heap is None and self._len < self._inline_size:
            self._buf[self._len] = value
            self._len += 1
            return
        self.reserve(1)
        self._heap.append(value)

    def pop(self) -> Optional[T]:
        """Remove and return the last element, or None when empty."""
        if self._heap is not None:
            return self._heap.pop() if self._heap else None
        if self._len == 0:
            return None
        self._len -= 1
        value = self._buf[self._len]
        self._buf[self._len] = None
        return value

    def insert(self, index: int, element: T) -> None:
        index = normalize_insert_index(index, len(self))
        if self._heap is None and self._len < self._inline_size:
            # Shift elements right to open the slot.
            for j in range(self._len, index, -1):
                self._buf[j] = self._buf[j - 1]
            self._buf[index] = element
            self._len += 1
            return
        self.reserve(1)
        self._heap.insert(index, element)

    def insert_many(self, index: int, iterable: Iterable[T]) -> None:
        index = normalize_insert_index(index, len(self))
        items = self._items()
        items[index:index] = list(iterable)
        self._replace_all(items)

    def remove(self, index: int) -> T:
        """Remove and return the element at ``index``, shifting later ones left."""
        index = normalize_index(index, len(self))
        if self._heap is not None:
            return self._heap.pop(index)
        value = self._buf[index]
        for j in range(index, self._len - 1):
            self._buf[j] = self._buf[j + 1]
        self._len -= 1
        self._buf[self._len] = None
        return value

    def swap_remove(self, index: int) -> T:
        """Remove the element at ``index``, replacing it with the last element."""
        index = normalize_index(index, len(self))
        last = self.pop()
        if index == len(self):
            return last
        removed = self[index]
        self[index] = last
        return removed

    def truncate(self, length: int) -> None:
        if length >= len(self):
            return
        if self._heap is not None:
            del self._heap[length:]
            return
        for i in range(length, self._len):
            self._buf[i] = None
        self._len = length

    def clear(self) -> None:
        self.truncate(0)

    def drain(self, start: int, stop: int) -> List[T]:
        """Remove ``[start, stop)`` at once and return the removed elements."""
        items = self._items()
        removed = items[start:stop]
        del items[start:stop]
        self._replace_all(items)
        return removed

    def append(self, other: "InlineVec[T]") -> None:
        """Move every element of ``other`` to the end, leaving ``other`` empty."""
        if other is self:
            raise ValueError("cannot append an InlineVec to itself")
        self.extend(other._items())
        other.clear()

    def extend(self, iterable: Iterable[T]) -> None:
        items = list(iterable)
        if not items:
            return
        self.reserve(len(items))
        if self._heap is not None:
            self._heap.extend(items)
        else:
            for item in items:
                self._buf[self._len] = item
                self._len += 1

    def extend_from_slice(self, other: Iterable[T]) -> None:
        self.extend(other)

    def insert_from_slice(self, index: int, other: Iterable[T]) -> None:
        self.insert_many(index, other)

    def resize(self, new_len: int, value: T) -> None:
        length = len(self)
        if new_len > length:
            self.extend([value] * (new_len - length))
        else:
            self.truncate(new_len)

    def resize_with(self, new_len: int, f: Callable[[], T]) -> None:
        length = len(self)
        if new_len > length:
            self.extend([f() for _ in range(new_len - length)])
        else:
            self.truncate(new_len)

    def dedup_by(self, same_bucket: Callable[[T, T], bool]) -> None:
        self._replace_all(dedup_values(self._items(), same_bucket))

    def dedup_by_key(self, key: Callable[[T], Any]) -> None:
        self.dedup_by(lambda a, b: key(a) == key(b))

    def dedup(self) -> None:
        self.dedup_by(lambda a, b: a == b)

    # ------------------------------ conversion --------------------------------

    def into_list(self) -> List[T]:
        """
        The contents as a list. A spilled vector hands over its heap list
        without copying; the InlineVec is left empty.
        """
        if self._heap is not None:
            items = self._heap
            self._heap = None
            self._heap_cap = 0
            return items
        items = self._items()
        self.clear()
        return items

    def into_inner(self) -> Optional[Tuple[T, ...]]:
        """
        The inline buffer as a tuple, if it is exactly full and not spilled.

        Returns None, leaving the vector unchanged, otherwise.
        """
        if self._heap is not None or self._len != self._inline_size:
            return None
        return tuple(self._buf[i] for i in range(self._len))

    def copy(self) -> "InlineVec[T]":
        clone = InlineVec(self._inline_size)
        items = self._items()
        if self._heap is not None:
            clone._spill(items, self._heap_cap)
        else:
            clone._replace_all(items)
        return clone
