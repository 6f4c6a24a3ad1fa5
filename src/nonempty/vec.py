"""
nonempty - NonEmptyVec

An owned, growable sequence that always holds at least one element.

The vector owns an ordinary Python ``list``. The list is never handed out
while the vector is alive, because a caller holding it could clear it.
Instead every mutator of ``list`` that cannot empty the vector is
reimplemented here, and every mutator that could is offered three ways:

    checked    try_pop(), try_remove(i), try_swap_remove(i), drain(r), splice(r, x)
               return None instead of emptying the vector
    guarded    swap_remove(NonZero), truncate(NonZero), split_off(NonZero), ...
               take an argument that rules the emptying case out
    unchecked  pop_unchecked(), remove_unchecked(i), drain_unchecked(r), ...
               always act; the caller guarantees an element remains

Conversions to and from ``list`` move the same list object; nothing is copied.

Usage:
    from nonempty import NonEmptyVec

    v = NonEmptyVec(10)
    v.push(20)
    v.push(30)
    v.try_pop()        # 30
    v.first()          # 10, no emptiness check needed
"""

from functools import total_ordering
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

from .bounds import (
    RangeLike,
    amortized_capacity,
    check_capacity,
    covers_all,
    normalize_index,
    normalize_insert_index,
    require,
    resolve_range,
)
from .errors import CollectionAllocError, EmptyInputError, PreconditionViolatedError
from .logger import log_rejection
from .nonzero import NonZero, as_nonzero
from .ownership import Drain, dedup_values, moved_error, structural
from .view import NonEmptySlice, ViewProjection, elements_of

T = TypeVar("T")
K = TypeVar("K")


@total_ordering
class NonEmptyVec(ViewProjection, Generic[T]):
    """
    A continuous non-empty vector.

    ``NonEmptyVec(first, *rest)`` cannot be called without an element, so
    positional construction is infallible.
    """

    __slots__ = ("_items", "_reserved", "_generation")

    def __init__(self, first: T, *rest: T):
        self._items: Optional[List[T]] = [first, *rest]
        self._reserved = len(self._items)
        self._generation = 0

    @classmethod
    def _wrap(cls, items: List[T], reserved: int = 0) -> "NonEmptyVec[T]":
        """Adopt ``items`` as-is. The caller guarantees it is a non-empty list."""
        vec = object.__new__(cls)
        vec._items = items
        vec._reserved = max(reserved, len(items))
        vec._generation = 0
        return vec

    @property
    def _vec(self) -> List[T]:
        items = self._items
        if items is None:
            raise moved_error(self)
        require(len(items) > 0, "NonEmptyVec", "backing list was emptied through an alias")
        return items

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, item: T) -> "NonEmptyVec[T]":
        """A vector holding exactly ``item``."""
        return cls._wrap([item])

    @classmethod
    def with_capacity(cls, item: T, capacity: int) -> "NonEmptyVec[T]":
        """
        A vector holding ``item`` with room for ``capacity`` elements.

        A capacity of 0 still reserves 1, since the vector always holds ``item``.
        """
        reserved = max(capacity, 1)
        error = check_capacity(reserved)
        if error is not None:
            raise error
        return cls._wrap([item], reserved)

    @classmethod
    def with_exact_capacity(cls, item: T, capacity: int) -> "NonEmptyVec[T]":
        """Like with_capacity, for a capacity already proven non-zero."""
        return cls.with_capacity(item, as_nonzero(capacity).get())

    @classmethod
    def from_elem(cls, elem: T, n: int) -> "NonEmptyVec[T]":
        """``elem`` repeated ``n`` times (a NonZero count). Elements are shared, as with ``[elem] * n``."""
        return cls._wrap([elem] * as_nonzero(n).get())

    @classmethod
    def from_array(cls, arr: Iterable[T]) -> "NonEmptyVec[T]":
        """
        Build from a fixed-size initializer known to be non-empty.

        Raises:
            PreconditionViolatedError: ``arr`` is empty (programmer error).
        """
        items = list(arr)
        if not items:
            raise PreconditionViolatedError(
                "Length of array must be non-zero to create NonEmptyVec."
            )
        return cls._wrap(items)

    @classmethod
    def try_from_list(cls, items: List[T]) -> "NonEmptyVec[T]":
        """
        Adopt ``items`` if it is not empty. O(1), no copy: the returned vector
        owns the very same list object.

        The caller must not mutate ``items`` afterwards; clearing it would empty
        the vector behind its back. Use take_from() for a vector that shares
        nothing with the caller.

        Raises:
            EmptyInputError: ``items`` is empty; ``error.original is items``.
        """
        if not isinstance(items, list):
            raise TypeError(
                f"try_from_list expects a list, got {type(items).__name__}; "
                f"use try_from_iterable for other collections"
            )
        if not items:
            log_rejection("NonEmptyVec.try_from_list", type(items).__name__)
            raise EmptyInputError(items, "NonEmptyVec")
        return cls._wrap(items)

    @classmethod
    def try_from_iterable(cls, iterable: Iterable[T]) -> "NonEmptyVec[T]":
        """
        Collect ``iterable`` into a new vector.

        Raises:
            EmptyInputError: nothing was produced; ``error.original`` is the
                iterable that was passed in.
        """
        items = list(iterable)
        if not items:
            log_rejection("NonEmptyVec.try_from_iterable", type(iterable).__name__)
            raise EmptyInputError(iterable, "NonEmptyVec")
        return cls._wrap(items)

    @classmethod
    def take_from(cls, items: List[T]) -> Optional["NonEmptyVec[T]"]:
        """
        Move the contents of ``items`` into a new vector and leave ``items`` empty.

        Returns None, leaving ``items`` untouched, if it was already empty.
        """
        if not items:
            return None
        moved = items[:]
        items.clear()
        return cls._wrap(moved)

    @classmethod
    def from_list_unchecked(cls, items: List[T]) -> "NonEmptyVec[T]":
        """
        Adopt ``items`` without checking it.

        The caller must guarantee ``items`` is not empty; an empty vector breaks
        first(), last() and every length-minus-one computation.
        """
        require(len(items) > 0, "NonEmptyVec.from_list_unchecked", "list is empty")
        return cls._wrap(items)

    @classmethod
    def from_slice(cls, view: NonEmptySlice[T]) -> "NonEmptyVec[T]":
        """Copy a NonEmptySlice into a new vector."""
        return view.to_vec()

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def into_list(self) -> List[T]:
        """Move the list out of the vector. The vector cannot be used afterwards."""
        items = self._vec
        self._generation += 1
        self._items = None
        return items

    def into_boxed_slice(self) -> NonEmptySlice[T]:
        """
        Convert into a boxed NonEmptySlice that owns the same list.

        ``into_boxed_slice().into_vec()`` gives back a vector over the
        original list object.
        """
        items = self.into_list()
        return NonEmptySlice._make(items, len(items), boxed=True)

    def to_list(self) -> List[T]:
        """A shallow copy of the elements as an ordinary list."""
        return self._vec[:]

    def as_slice(self) -> NonEmptySlice[T]:
        """A view over the whole vector, valid until the next structural change."""
        items = self._vec
        return NonEmptySlice._make(items, len(items), owner=self)

    def clone(self) -> "NonEmptyVec[T]":
        """A new vector over a shallow copy of the elements."""
        return NonEmptyVec._wrap(self._vec[:], self._reserved)

    __copy__ = clone

    # ------------------------------------------------------------------
    # Length and capacity
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._vec)

    def capacity(self) -> NonZero:
        """
        Room reserved for elements, never 0 and never below len().

        Python lists manage their own over-allocation, so this reports the
        reservation made through with_capacity/reserve plus amortized growth.

        Reserving and shrinking only adjust that bookkeeping and never move
        elements, so unlike NonEmptySmallVec they leave views valid.
        """
        return NonZero.new_unchecked(max(self._reserved, len(self._vec)))

    def _grow_to_fit(self) -> None:
        length = len(self._vec)
        if length > self._reserved:
            self._reserved = amortized_capacity(self._reserved, length)

    def reserve(self, additional: int) -> None:
        """Reserve room for at least ``additional`` more elements."""
        error = self.try_reserve(additional)
        if error is not None:
            raise error

    def reserve_exact(self, additional: int) -> None:
        """Reserve room for exactly ``additional`` more elements."""
        error = self.try_reserve_exact(additional)
        if error is not None:
            raise error

    def try_reserve(self, additional: int) -> Optional[CollectionAllocError]:
        """Like reserve, but returns the allocation error instead of raising it."""
        needed = len(self._vec) + additional
        error = check_capacity(needed)
        if error is None and needed > self._reserved:
            self._reserved = amortized_capacity(self._reserved, needed)
        return error

    def try_reserve_exact(self, additional: int) -> Optional[CollectionAllocError]:
        """Like reserve_exact, but returns the allocation error instead of raising it."""
        needed = len(self._vec) + additional
        error = check_capacity(needed)
        if error is None:
            self._reserved = max(self._reserved, needed)
        return error

    def shrink_to_fit(self) -> None:
        self._reserved = len(self._vec)

    def shrink_to(self, min_capacity: int) -> None:
        """Lower the capacity to ``max(len, min_capacity)`` if it is currently above that."""
        self._reserved = max(len(self._vec), min(self._reserved, min_capacity))

    # ------------------------------------------------------------------
    # Additive mutation
    # ------------------------------------------------------------------

    @structural
    def push(self, value: T) -> None:
        self._vec.append(value)
        self._grow_to_fit()

    @structural
    def insert(self, index: int, element: T) -> None:
        """Insert at ``index``, shifting later elements right. ``index == len`` appends."""
        items = self._vec
        items.insert(normalize_insert_index(index, len(items)), element)
        self._grow_to_fit()

    @structural
    def append_list(self, other: List[T]) -> None:
        """Move every element of ``other`` to the end of the vector, leaving ``other`` empty."""
        items = self._vec
        if other is items:
            raise ValueError("cannot append a NonEmptyVec's storage to itself")
        items.extend(other)
        other.clear()
        self._grow_to_fit()

    @structural
    def extend(self, iterable: Iterable[T]) -> None:
        self._vec.extend(iterable)
        self._grow_to_fit()

    def extend_from_slice(self, other: Iterable[T]) -> None:
        """Append a copy of every element of ``other``."""
        self.extend(list(other))

    @structural
    def extend_from_within(self, src: RangeLike) -> None:
        """Append a copy of the elements in range ``src`` of the vector itself."""
        items = self._vec
        start, stop = resolve_range(src, len(items))
        items.extend(items[start:stop])
        self._grow_to_fit()

    @structural
    def resize(self, new_len: int, value: T) -> None:
        """Grow with copies of ``value`` or shrink to ``new_len`` (a NonZero length)."""
        target = as_nonzero(new_len).get()
        items = self._vec
        if target > len(items):
            items.extend([value] * (target - len(items)))
            self._grow_to_fit()
        else:
            del items[target:]

    @structural
    def resize_with(self, new_len: int, f: Callable[[], T]) -> None:
        """Like resize, filling new slots with ``f()``."""
        target = as_nonzero(new_len).get()
        items = self._vec
        if target > len(items):
            items.extend(f() for _ in range(target - len(items)))
            self._grow_to_fit()
        else:
            del items[target:]

    @structural
    def truncate(self, length: int) -> None:
        """Keep the first ``length`` elements. ``length`` is a NonZero, so one always remains."""
        del self._vec[as_nonzero(length).get():]

    @structural
    def dedup_by(self, same_bucket: Callable[[T, T], bool]) -> None:
        """Remove consecutive elements for which ``same_bucket(current, previous)`` holds."""
        items = self._vec
        items[:] = dedup_values(items, same_bucket)

    def dedup_by_key(self, key: Callable[[T], K]) -> None:
        """Remove consecutive elements that map to the same key."""
        self.dedup_by(lambda a, b: key(a) == key(b))

    def dedup(self) -> None:
        """Remove consecutive repeated elements. Never empties the vector."""
        self.dedup_by(lambda a, b: a == b)

    # ------------------------------------------------------------------
    # Removal: checked / guarded / unchecked
    # ------------------------------------------------------------------

    @structural
    def try_pop(self) -> Optional[T]:
        """Remove and return the last element, or None if it is the only one."""
        items = self._vec
        if len(items) == 1:
            return None
        return items.pop()

    @structural
    def pop_unchecked(self) -> T:
        """Remove and return the last element. The caller guarantees len() > 1."""
        items = self._vec
        require(len(items) > 1, "NonEmptyVec.pop_unchecked", "popping the only element")
        return items.pop()

    @structural
    def try_remove(self, index: int) -> Optional[T]:
        """Remove and return the element at ``index``, or None if it is the only one."""
        items = self._vec
        if len(items) == 1:
            return None
        return items.pop(normalize_index(index, len(items)))

    @structural
    def remove_unchecked(self, index: int) -> T:
        """Remove and return the element at ``index``. The caller guarantees len() > 1."""
        items = self._vec
        require(len(items) > 1, "NonEmptyVec.remove_unchecked", "removing the only element")
        return items.pop(normalize_index(index, len(items)))

    def _swap_remove(self, index: int) -> T:
        items = self._vec
        index = normalize_index(index, len(items))
        last = items.pop()
        if index == len(items):
            return last
        removed = items[index]
        items[index] = last
        return removed

    @structural
    def try_swap_remove(self, index: int) -> Optional[T]:
        """
        Remove the element at ``index`` and move the last element into its slot.

        Returns None if the element is the only one.
        """
        if len(self._vec) == 1:
            return None
        return self._swap_remove(index)

    @structural
    def swap_remove(self, index: int) -> T:
        """
        Swap-remove at a NonZero ``index``.

        Index 0 is excluded, so the vector holds at least two elements
        whenever the index is in bounds.
        """
        return self._swap_remove(as_nonzero(index).get())

    @structural
    def swap_remove_unchecked(self, index: int) -> T:
        """Swap-remove at ``index``. The caller guarantees len() > 1."""
        require(len(self._vec) > 1, "NonEmptyVec.swap_remove_unchecked", "removing the only element")
        return self._swap_remove(index)

    def drain(self, rng: RangeLike = None) -> Optional[Drain[T]]:
        """
        Lazily remove the elements in ``rng``.

        Returns None, removing nothing, when ``rng`` spans the whole vector.
        Otherwise returns a Drain; consuming it removes exactly that range.
        An empty range drains nothing.
        """
        items = self._vec
        start, stop = resolve_range(rng, len(items))
        if covers_all(start, stop, len(items)):
            return None
        return Drain(self, items.pop, start, stop)

    def drain_unchecked(self, rng: RangeLike = None) -> Drain[T]:
        """Like drain, without the whole-range check. The caller guarantees something remains."""
        items = self._vec
        start, stop = resolve_range(rng, len(items))
        require(
            not covers_all(start, stop, len(items)),
            "NonEmptyVec.drain_unchecked", "range covers the whole vector",
        )
        return Drain(self, items.pop, start, stop)

    @structural
    def splice(self, rng: RangeLike, replace_with: Iterable[T]) -> Optional[List[T]]:
        """
        Replace the elements in ``rng`` with ``replace_with``.

        Returns the removed elements, or None (changing nothing) if the result
        would be empty.
        """
        items = self._vec
        start, stop = resolve_range(rng, len(items))
        replacement = list(replace_with)
        if not replacement and covers_all(start, stop, len(items)):
            return None
        removed = items[start:stop]
        items[start:stop] = replacement
        self._grow_to_fit()
        return removed

    @structural
    def splice_unchecked(self, rng: RangeLike, replace_with: Iterable[T]) -> List[T]:
        """Like splice, without the emptiness check."""
        items = self._vec
        start, stop = resolve_range(rng, len(items))
        replacement = list(replace_with)
        require(
            bool(replacement) or not covers_all(start, stop, len(items)),
            "NonEmptyVec.splice_unchecked", "splice would leave the vector empty",
        )
        removed = items[start:stop]
        items[start:stop] = replacement
        self._grow_to_fit()
        return removed

    @structural
    def split_off(self, at: int) -> List[T]:
        """
        Split off the elements from NonZero index ``at`` into an ordinary list.

        Index 0 would move everything out, so it is excluded. The tail may
        be empty (``at == len``), hence a plain list.
        """
        at = as_nonzero(at).get()
        items = self._vec
        if at > len(items):
            raise IndexError(f"`at` split index (is {at}) should be <= len (is {len(items)})")
        tail = items[at:]
        del items[at:]
        return tail

    # ------------------------------------------------------------------
    # Comparison and display
    # ------------------------------------------------------------------

    def __eq__(self, other: Any) -> bool:
        other_items = elements_of(other)
        if other_items is None:
            return NotImplemented
        return tuple(self._vec) == other_items

    def __lt__(self, other: Any) -> bool:
        other_items = elements_of(other)
        if other_items is None:
            return NotImplemented
        return tuple(self._vec) < other_items

    __hash__ = None

    def __repr__(self) -> str:
        if self._items is None:
            return "NonEmptyVec(<moved>)"
        return f"NonEmptyVec({self._items!r})"
